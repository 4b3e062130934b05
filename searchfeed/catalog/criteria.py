"""Catalog query criteria.

Criteria describe which products the repository returns: filter
predicates, the pagination window and the associations to load with
each product. They are built fresh per request and never change once
handed to a repository.
"""

from dataclasses import dataclass, replace
from enum import Enum
from uuid import UUID

from searchfeed.domain.entities import ProductVisibility
from searchfeed.domain.value_objects import StorefrontContext

# Associations the export needs on every product
PRODUCT_ASSOCIATIONS: tuple[str, ...] = (
    "prices",
    "categories",
    "seo_urls",
    "media",
    "properties",
)


# ============================================================================
# Filters
# ============================================================================


class FilterOperator(str, Enum):
    """How the queries of a MultiFilter are joined."""

    AND = "and"
    OR = "or"


@dataclass(frozen=True)
class EqualsFilter:
    """Field equals value; a None value matches absent fields."""

    field: str
    value: str | None


@dataclass(frozen=True)
class MultiFilter:
    """Joins several filters with AND or OR."""

    operator: FilterOperator
    queries: tuple["Filter", ...]


@dataclass(frozen=True)
class ProductAvailableFilter:
    """Product is active and visible in a sales channel.

    Attributes:
        sales_channel_id: Channel the product must be visible in.
        visibility: Minimum visibility level.
    """

    sales_channel_id: str
    visibility: ProductVisibility = ProductVisibility.ALL


Filter = EqualsFilter | MultiFilter | ProductAvailableFilter


# ============================================================================
# Criteria
# ============================================================================


@dataclass(frozen=True)
class CatalogCriteria:
    """Immutable catalog query.

    Attributes:
        ids: Restrict the result to these ids, in this order. None for no
            restriction, an empty tuple matches nothing.
        filters: Filters, all of which must match.
        associations: Associations to load.
        offset: Index of the first row, None for no offset.
        limit: Maximum number of rows, None for no limit.
    """

    ids: tuple[str, ...] | None = None
    filters: tuple[Filter, ...] = ()
    associations: tuple[str, ...] = ()
    offset: int | None = None
    limit: int | None = None

    @classmethod
    def for_ids(cls, ids: list[str]) -> "CatalogCriteria":
        """Create criteria that only select the given ids.

        Args:
            ids: Product ids.

        Returns:
            Criteria without filters or window.
        """
        return cls(ids=tuple(ids))

    def with_filter(self, query: Filter) -> "CatalogCriteria":
        return replace(self, filters=self.filters + (query,))

    def with_associations(self, *associations: str) -> "CatalogCriteria":
        added = tuple(a for a in associations if a not in self.associations)
        return replace(self, associations=self.associations + added)

    def with_window(self, offset: int | None, limit: int | None) -> "CatalogCriteria":
        return replace(self, offset=offset, limit=limit)


def normalize_uuid(value: str) -> str | None:
    """Convert a UUID string into the catalog's 32 character hex form.

    Args:
        value: Candidate UUID, with or without dashes.

    Returns:
        Lowercase hex id, None if value is not a valid UUID.
    """
    try:
        return UUID(value).hex
    except ValueError:
        return None


# ============================================================================
# Criteria Builder
# ============================================================================


class ProductCriteriaBuilder:
    """Builds product criteria for one export call.

    Example usage:
        builder = ProductCriteriaBuilder(context, product_id="SW10001")
        total_criteria = builder.build()
        page_criteria = builder.build(offset=0, limit=20)
    """

    def __init__(
        self,
        context: StorefrontContext,
        product_id: str | None = None,
    ) -> None:
        """Initialize builder.

        Args:
            context: Storefront context of the export.
            product_id: Optional UUID, EAN, manufacturer number or SKU.
        """
        self.context = context
        self.product_id = product_id or None

    def build(
        self,
        offset: int | None = None,
        limit: int | None = None,
        with_visibility_filter: bool = True,
    ) -> CatalogCriteria:
        """Build product criteria.

        Args:
            offset: Index of the first product.
            limit: Maximum number of products.
            with_visibility_filter: Only select products searchable in the channel.

        Returns:
            Criteria for the repository.
        """
        criteria = CatalogCriteria().with_filter(EqualsFilter("parent_id", None))

        if with_visibility_filter:
            criteria = criteria.with_filter(
                ProductAvailableFilter(
                    self.context.sales_channel_id,
                    ProductVisibility.SEARCH,
                )
            )

        if self.product_id:
            criteria = criteria.with_filter(self._product_id_filter(self.product_id))

        criteria = criteria.with_associations(*PRODUCT_ASSOCIATIONS)

        if offset is not None or limit is not None:
            criteria = criteria.with_window(offset, limit)

        return criteria

    def _product_id_filter(self, product_id: str) -> MultiFilter:
        """Match the product id against every identifying field.

        The id field is only queried for valid UUIDs, as the catalog
        rejects malformed ids.
        """
        queries: list[Filter] = [
            EqualsFilter("ean", product_id),
            EqualsFilter("manufacturer_number", product_id),
            EqualsFilter("product_number", product_id),
        ]

        uuid = normalize_uuid(product_id)
        if uuid is not None:
            queries.append(EqualsFilter("id", uuid))

        return MultiFilter(FilterOperator.OR, tuple(queries))
