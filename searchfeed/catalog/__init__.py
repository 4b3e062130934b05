"""Storefront catalog access.

Provides query criteria, SQLAlchemy models, repositories and the
category hierarchy walk used by the export.
"""

from searchfeed.catalog.criteria import (
    PRODUCT_ASSOCIATIONS,
    CatalogCriteria,
    EqualsFilter,
    FilterOperator,
    MultiFilter,
    ProductAvailableFilter,
    ProductCriteriaBuilder,
    normalize_uuid,
)
from searchfeed.catalog.hierarchy import CategoryHierarchy
from searchfeed.catalog.repository import (
    CategoryRepository,
    CustomerGroupRepository,
    IdSearchResult,
    ProductRepository,
    SalesChannelRepository,
)

__all__ = [
    # Criteria
    "PRODUCT_ASSOCIATIONS",
    "CatalogCriteria",
    "EqualsFilter",
    "FilterOperator",
    "MultiFilter",
    "ProductAvailableFilter",
    "ProductCriteriaBuilder",
    "normalize_uuid",
    # Hierarchy
    "CategoryHierarchy",
    # Repositories
    "CategoryRepository",
    "CustomerGroupRepository",
    "IdSearchResult",
    "ProductRepository",
    "SalesChannelRepository",
]
