"""Domain layer - Entities, value objects, state machine, exceptions.

This module exports the core domain building blocks:

- **Entities**: Read-only catalog snapshots (Product, Category, SalesChannel)
- **Value Objects**: Immutable export input and output (ExportRequest, ExportItem, ExportFeed)
- **State Machine**: Stages of one export call (ExportStage)
- **Exceptions**: Domain-specific errors

Example usage:
    from searchfeed.domain import ExportRequest, ExportFeed

    request = ExportRequest(shopkey="ABCD0123", start=0, count=20)
"""

from searchfeed.domain.base import Entity, ValueObject
from searchfeed.domain.entities import (
    Category,
    CustomerGroup,
    Product,
    ProductAttribute,
    ProductMedia,
    ProductPrice,
    ProductVisibility,
    SalesChannel,
    SalesChannelDomain,
    SeoUrl,
    SystemConfigEntry,
)
from searchfeed.domain.exceptions import (
    DomainError,
    ExportErrorKind,
    InvalidExportRequestError,
    InvalidStateTransitionError,
    ProductInvalidError,
    SearchServiceError,
    SearchServiceUnavailableError,
    ServiceConfigError,
    StorefrontContextError,
    UnknownShopkeyError,
)
from searchfeed.domain.state_machines import ExportProgress, ExportStage
from searchfeed.domain.value_objects import (
    DEFAULT_COUNT,
    DEFAULT_START,
    ExportError,
    ExportFeed,
    ExportItem,
    ExportRequest,
    ItemAttribute,
    ItemPrice,
    StorefrontContext,
)

__all__ = [
    # Base
    "Entity",
    "ValueObject",
    # Entities
    "Category",
    "CustomerGroup",
    "Product",
    "ProductAttribute",
    "ProductMedia",
    "ProductPrice",
    "ProductVisibility",
    "SalesChannel",
    "SalesChannelDomain",
    "SeoUrl",
    "SystemConfigEntry",
    # Exceptions
    "DomainError",
    "ExportErrorKind",
    "InvalidExportRequestError",
    "InvalidStateTransitionError",
    "ProductInvalidError",
    "SearchServiceError",
    "SearchServiceUnavailableError",
    "ServiceConfigError",
    "StorefrontContextError",
    "UnknownShopkeyError",
    # State machine
    "ExportProgress",
    "ExportStage",
    # Value objects
    "DEFAULT_COUNT",
    "DEFAULT_START",
    "ExportError",
    "ExportFeed",
    "ExportItem",
    "ExportRequest",
    "ItemAttribute",
    "ItemPrice",
    "StorefrontContext",
]
