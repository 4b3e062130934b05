"""Value Objects for the domain layer.

Value objects are immutable objects that are defined by their attributes
rather than identity. They cover the export request, the storefront
context bound to it, and everything the export produces.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from searchfeed.domain.base import ValueObject
from searchfeed.domain.entities import SalesChannel, SalesChannelDomain
from searchfeed.domain.exceptions import (
    ExportErrorKind,
    InvalidExportRequestError,
    ProductInvalidError,
)

DEFAULT_START = 0
DEFAULT_COUNT = 20


# ============================================================================
# Export Request
# ============================================================================


@dataclass(frozen=True)
class ExportRequest(ValueObject):
    """Parameters of one export call.

    Attributes:
        shopkey: Opaque tenant key.
        start: Offset of the first exported product.
        count: Maximum number of products in the page.
        product_id: Optional UUID, EAN, manufacturer number or SKU of a
            single product to export.
    """

    shopkey: str
    start: int = DEFAULT_START
    count: int = DEFAULT_COUNT
    product_id: str | None = None

    def __post_init__(self) -> None:
        """Validate parameters.

        Raises:
            InvalidExportRequestError: If any constraint is violated.
        """
        violations = []
        if not self.shopkey or not self.shopkey.strip():
            violations.append("shopkey: This value should not be blank.")
        if self.start < 0:
            violations.append("start: This value should be greater than or equal to 0.")
        if self.count <= 0:
            violations.append("count: This value should be greater than 0.")
        if violations:
            raise InvalidExportRequestError(violations)

    @property
    def targets_product(self) -> bool:
        """Check whether a single product was requested."""
        return bool(self.product_id)


# ============================================================================
# Storefront Context
# ============================================================================


@dataclass(frozen=True)
class StorefrontContext(ValueObject):
    """Tenant, channel and locale bound to one export call.

    Attributes:
        token: Context token of the caller.
        sales_channel: Resolved sales channel.
        customer_group_id: Current customer group, if any.
    """

    token: str
    sales_channel: SalesChannel
    customer_group_id: str | None = None

    @property
    def sales_channel_id(self) -> str:
        return self.sales_channel.id

    @property
    def language_id(self) -> str:
        return self.sales_channel.language_id

    @property
    def navigation_category_id(self) -> str | None:
        return self.sales_channel.navigation_category_id

    @property
    def domains(self) -> tuple[SalesChannelDomain, ...]:
        return self.sales_channel.domains


# ============================================================================
# Export Output
# ============================================================================


@dataclass(frozen=True)
class ItemPrice(ValueObject):
    """Exported price, optionally scoped to a user group hash.

    An empty usergroup marks the default price.
    """

    value: Decimal
    usergroup: str = ""


@dataclass(frozen=True)
class ItemAttribute(ValueObject):
    """Exported attribute with its values in order."""

    key: str
    values: tuple[str, ...]


@dataclass(frozen=True)
class ExportItem(ValueObject):
    """One exported product.

    Produced once per valid product and never mutated afterwards.

    Attributes:
        id: Product ID.
        name: Product name.
        url: Resolved public product URL.
        description: Product description.
        order_numbers: SKU, EAN and manufacturer number (non-empty ones).
        prices: Default price plus one price per customer group.
        attributes: Product attributes including category names and URLs.
        images: Image URLs ordered by position.
        date_added: Creation timestamp of the product.
        usergroups: Hashes of all customer groups of the shop. Catalog
            visibility is per sales channel, never per customer group.
    """

    id: str
    name: str
    url: str
    description: str | None = None
    order_numbers: tuple[str, ...] = ()
    prices: tuple[ItemPrice, ...] = ()
    attributes: tuple[ItemAttribute, ...] = ()
    images: tuple[str, ...] = ()
    date_added: datetime | None = None
    usergroups: tuple[str, ...] = ()

    def attribute(self, key: str) -> ItemAttribute | None:
        """Get an attribute by key.

        Args:
            key: Attribute key.

        Returns:
            The attribute, None if absent.
        """
        for attribute in self.attributes:
            if attribute.key == key:
                return attribute
        return None

    @property
    def category_urls(self) -> tuple[str, ...]:
        """Get the exported category path URLs."""
        attribute = self.attribute("cat_url")
        return attribute.values if attribute else ()


@dataclass(frozen=True)
class ExportError(ValueObject):
    """A recovered export failure.

    Attributes:
        kind: What went wrong.
        message: Human-readable cause.
        product_id: Affected product or requested product id.
    """

    kind: ExportErrorKind
    message: str
    product_id: str | None = None

    @classmethod
    def from_product_error(cls, error: ProductInvalidError) -> "ExportError":
        """Create from a product validation failure.

        Args:
            error: The raised validation error.

        Returns:
            ExportError carrying kind, message and product.
        """
        return cls(kind=error.kind, message=error.message, product_id=error.product_id)

    @classmethod
    def for_kind(cls, kind: ExportErrorKind, product_id: str | None = None) -> "ExportError":
        """Create an error with the standard message of its kind.

        Args:
            kind: What went wrong.
            product_id: Affected product or requested product id.

        Returns:
            ExportError instance.
        """
        return cls(kind=kind, message=kind.describe(product_id), product_id=product_id)


@dataclass(frozen=True)
class ExportFeed(ValueObject):
    """A page of exported items.

    Item order matches the order returned by the catalog.

    Attributes:
        items: Exported items.
        start: Offset of the page.
        total_count: Number of exportable products in the catalog.
    """

    items: tuple[ExportItem, ...] = field(default_factory=tuple)
    start: int = 0
    total_count: int = 0

    @property
    def page_count(self) -> int:
        """Get the number of items in this page."""
        return len(self.items)
