"""Catalog repositories for database operations.

Translate catalog criteria into SQL and map rows to immutable domain
entities. Repositories never hand out ORM instances.
"""

from dataclasses import dataclass
from typing import Any

from sqlalchemy import and_, case, false, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from searchfeed.catalog.criteria import (
    CatalogCriteria,
    EqualsFilter,
    Filter,
    FilterOperator,
    MultiFilter,
    ProductAvailableFilter,
)
from searchfeed.catalog.models import (
    CategoryModel,
    CustomerGroupModel,
    ProductModel,
    ProductVisibilityModel,
    SalesChannelModel,
)
from searchfeed.domain.entities import Category, CustomerGroup, Product, SalesChannel


@dataclass(frozen=True)
class IdSearchResult:
    """Ids of one result page plus the total number of matches.

    Attributes:
        ids: Matching ids of the requested window, in result order.
        total: Number of matches ignoring the window.
    """

    ids: list[str]
    total: int


class ProductRepository:
    """Repository for product queries.

    Results are ordered by creation time, then id, unless the criteria
    restrict to explicit ids, in which case the given id order wins.

    Example usage:
        async with async_session_factory() as session:
            repo = ProductRepository(session)
            result = await repo.search_ids(criteria)
            products = await repo.search(criteria)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def search(self, criteria: CatalogCriteria) -> list[Product]:
        """Find products matching the criteria.

        Args:
            criteria: Filters, window and associations.

        Returns:
            Product snapshots with the requested associations loaded.
        """
        query = self._apply_window(
            select(ProductModel).where(*self._conditions(criteria)),
            criteria,
        )
        query = query.options(*self._loader_options(criteria.associations))

        result = await self.session.execute(query)
        return [model.to_entity() for model in result.scalars().all()]

    async def search_ids(self, criteria: CatalogCriteria) -> IdSearchResult:
        """Find the ids of products matching the criteria.

        Args:
            criteria: Filters and window.

        Returns:
            Ids of the window plus the total match count.
        """
        conditions = self._conditions(criteria)

        query = self._apply_window(select(ProductModel.id).where(*conditions), criteria)
        result = await self.session.execute(query)
        ids = list(result.scalars().all())

        count_query = select(func.count(ProductModel.id)).where(*conditions)
        total = (await self.session.execute(count_query)).scalar_one()

        return IdSearchResult(ids=ids, total=total)

    def _conditions(self, criteria: CatalogCriteria) -> list[Any]:
        """Translate criteria ids and filters into SQL conditions."""
        conditions = [self._condition(query) for query in criteria.filters]
        if criteria.ids == ():
            conditions.append(false())
        elif criteria.ids is not None:
            conditions.append(ProductModel.id.in_(criteria.ids))
        return conditions

    def _condition(self, query: Filter) -> Any:
        """Translate a single filter into a SQL condition.

        Raises:
            ValueError: If the filter references an unknown field.
        """
        if isinstance(query, EqualsFilter):
            column = self._get_column(query.field)
            if query.value is None:
                return column.is_(None)
            return column == query.value

        if isinstance(query, MultiFilter):
            parts = [self._condition(part) for part in query.queries]
            if query.operator == FilterOperator.OR:
                return or_(*parts)
            return and_(*parts)

        if isinstance(query, ProductAvailableFilter):
            return and_(
                ProductModel.active.is_(True),
                ProductModel.visibilities.any(
                    and_(
                        ProductVisibilityModel.sales_channel_id == query.sales_channel_id,
                        ProductVisibilityModel.visibility >= int(query.visibility),
                    )
                ),
            )

        raise ValueError(f"Unsupported filter: {query!r}")

    def _apply_window(self, query: Any, criteria: CatalogCriteria) -> Any:
        """Apply ordering and pagination."""
        if criteria.ids:
            position = case(
                {product_id: index for index, product_id in enumerate(criteria.ids)},
                value=ProductModel.id,
            )
            query = query.order_by(position)
        else:
            query = query.order_by(ProductModel.created_at.asc(), ProductModel.id.asc())

        if criteria.offset is not None:
            query = query.offset(criteria.offset)
        if criteria.limit is not None:
            query = query.limit(criteria.limit)
        return query

    def _loader_options(self, associations: tuple[str, ...]) -> list[Any]:
        """Get eager loading options for the requested associations.

        Raises:
            ValueError: If an association is unknown.
        """
        loaders = {
            "prices": lambda: selectinload(ProductModel.prices),
            "categories": lambda: selectinload(ProductModel.categories).selectinload(
                CategoryModel.seo_urls
            ),
            "seo_urls": lambda: selectinload(ProductModel.seo_urls),
            "media": lambda: selectinload(ProductModel.media),
            "properties": lambda: selectinload(ProductModel.properties),
        }
        options = []
        for association in associations:
            if association not in loaders:
                raise ValueError(f"Unknown product association: {association}")
            options.append(loaders[association]())
        return options

    def _get_column(self, field: str) -> Any:
        """Get SQLAlchemy column for filtering.

        Args:
            field: Filter field name.

        Returns:
            SQLAlchemy column.
        """
        columns = {
            "id": ProductModel.id,
            "parent_id": ProductModel.parent_id,
            "product_number": ProductModel.product_number,
            "ean": ProductModel.ean,
            "manufacturer_number": ProductModel.manufacturer_number,
        }
        if field not in columns:
            raise ValueError(f"Unknown product field: {field}")
        return columns[field]


class CategoryRepository:
    """Repository for category lookups."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, category_id: str) -> Category | None:
        """Get category by ID with its SEO URLs.

        Args:
            category_id: Category ID.

        Returns:
            Category if found, None otherwise.
        """
        query = (
            select(CategoryModel)
            .where(CategoryModel.id == category_id)
            .options(selectinload(CategoryModel.seo_urls))
        )
        result = await self.session.execute(query)
        model = result.scalar_one_or_none()
        return model.to_entity() if model else None


class SalesChannelRepository:
    """Repository for sales channel lookups."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, sales_channel_id: str) -> SalesChannel | None:
        """Get sales channel by ID with its domains.

        Args:
            sales_channel_id: Sales channel ID.

        Returns:
            SalesChannel if found, None otherwise.
        """
        query = (
            select(SalesChannelModel)
            .where(SalesChannelModel.id == sales_channel_id)
            .options(selectinload(SalesChannelModel.domains))
        )
        result = await self.session.execute(query)
        model = result.scalar_one_or_none()
        return model.to_entity() if model else None


class CustomerGroupRepository:
    """Repository for customer groups."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_all(self) -> list[CustomerGroup]:
        """Get all customer groups ordered by ID."""
        result = await self.session.execute(
            select(CustomerGroupModel).order_by(CustomerGroupModel.id)
        )
        return [model.to_entity() for model in result.scalars().all()]
