"""Export orchestration.

Drives one export call through its stages: resolve the shopkey, count
the exportable products, fetch the requested page, build an item per
product and hand the result to serialization. Item failures never abort
the call; they are only reported back when a single product was
requested.
"""

from dataclasses import dataclass, field
from uuid import uuid4

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from searchfeed.catalog.criteria import ProductCriteriaBuilder
from searchfeed.catalog.hierarchy import CategoryHierarchy
from searchfeed.catalog.repository import (
    CategoryRepository,
    CustomerGroupRepository,
    ProductRepository,
)
from searchfeed.domain.entities import Product
from searchfeed.domain.exceptions import (
    ExportErrorKind,
    ProductInvalidError,
    StorefrontContextError,
    UnknownShopkeyError,
)
from searchfeed.domain.state_machines import ExportProgress, ExportStage
from searchfeed.domain.value_objects import (
    ExportError,
    ExportFeed,
    ExportItem,
    ExportRequest,
    StorefrontContext,
)
from searchfeed.export.item_builder import ItemBuilder
from searchfeed.export.shopkey import ShopkeyResolver, StorefrontContextFactory
from searchfeed.export.url_builder import UrlBuilder
from searchfeed.infrastructure.config import settings
from searchfeed.infrastructure.routing import Router
from searchfeed.infrastructure.system_config import SystemConfigRepository

logger = structlog.get_logger()


# ============================================================================
# Service Result Types
# ============================================================================


@dataclass
class ExportResult:
    """Result of one export call.

    Exactly one of feed and errors is populated.

    Attributes:
        export_id: Identifier of the call, used in logs.
        stage: Terminal stage of the call.
        feed: Exported page, None if errors were recorded.
        errors: Errors to report to the caller.
    """

    export_id: str
    stage: ExportStage
    feed: ExportFeed | None = None
    errors: list[ExportError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def error_messages(self) -> list[str]:
        return [error.message for error in self.errors]


# ============================================================================
# Export Service
# ============================================================================


class ExportService:
    """Application service for catalog exports.

    Everything bound to a storefront context (criteria, URL builder,
    category hierarchy, item builder) is created per call.

    Example usage:
        service = ExportService(session)
        result = await service.export(
            ExportRequest(shopkey="ABCD0123", start=0, count=20),
            base_url="https://shop.example.com",
        )
    """

    def __init__(
        self,
        session: AsyncSession,
        default_sales_channel_id: str | None = None,
    ) -> None:
        """Initialize export service.

        Args:
            session: Async SQLAlchemy session.
            default_sales_channel_id: Sales channel of the caller, defaults to settings.
        """
        self.session = session
        self.default_sales_channel_id = (
            default_sales_channel_id or settings.default_sales_channel_id
        )
        self.products = ProductRepository(session)
        self.categories = CategoryRepository(session)
        self.customer_groups = CustomerGroupRepository(session)
        self.shopkey_resolver = ShopkeyResolver(
            SystemConfigRepository(session),
            StorefrontContextFactory(session),
        )

    async def export(
        self,
        request: ExportRequest,
        base_url: str,
        token: str | None = None,
    ) -> ExportResult:
        """Export one page of the catalog.

        Args:
            request: Validated export parameters.
            base_url: Storefront base URL for non-SEO links.
            token: Context token of the caller.

        Returns:
            ExportResult with the feed, or with errors for a targeted product.

        Raises:
            UnknownShopkeyError: If the shopkey is not bound to any channel.
            StorefrontContextError: If the bound channel does not exist.
        """
        progress = ExportProgress(export_id=uuid4().hex)
        log = logger.bind(export_id=progress.export_id, shopkey=request.shopkey)

        try:
            context = await self.shopkey_resolver.resolve(
                request.shopkey,
                token or uuid4().hex,
                self.default_sales_channel_id,
            )
        except (UnknownShopkeyError, StorefrontContextError) as e:
            self._advance(progress, ExportStage.FAILED, log)
            log.warning("Export failed", error=e.message)
            raise

        self._advance(progress, ExportStage.COMPUTING_TOTAL, log)
        criteria_builder = ProductCriteriaBuilder(context, request.product_id)
        total = (await self.products.search_ids(criteria_builder.build())).total

        self._advance(progress, ExportStage.FETCHING_PAGE, log)
        errors: list[ExportError] = []
        products = await self._fetch_page(criteria_builder, request, errors, log)

        self._advance(progress, ExportStage.BUILDING_ITEMS, log)
        items = await self._build_items(products, context, request, base_url, errors, log)

        self._advance(progress, ExportStage.SERIALIZING, log)
        if errors:
            self._advance(progress, ExportStage.FAILED, log)
            return ExportResult(
                export_id=progress.export_id,
                stage=progress.stage,
                errors=errors,
            )

        feed = ExportFeed(
            items=tuple(items),
            start=request.start,
            total_count=max(total, len(items)),
        )
        self._advance(progress, ExportStage.DONE, log)
        log.info(
            "Export completed",
            start=feed.start,
            page_count=feed.page_count,
            total_count=feed.total_count,
        )
        return ExportResult(export_id=progress.export_id, stage=progress.stage, feed=feed)

    async def _fetch_page(
        self,
        criteria_builder: ProductCriteriaBuilder,
        request: ExportRequest,
        errors: list[ExportError],
        log: structlog.stdlib.BoundLogger,
    ) -> list[Product]:
        """Fetch the requested page of searchable products.

        An empty page for a targeted product is retried once without the
        visibility filter to tell a hidden product from a missing one.
        Either way an error is recorded and no product is returned.
        """
        products = await self.products.search(
            criteria_builder.build(offset=request.start, limit=request.count)
        )
        if products or not request.targets_product:
            return products

        log.info("Retrying product lookup without visibility", product_id=request.product_id)
        hidden = await self.products.search_ids(
            criteria_builder.build(
                offset=request.start,
                limit=request.count,
                with_visibility_filter=False,
            )
        )
        kind = ExportErrorKind.NOT_SEARCHABLE if hidden.ids else ExportErrorKind.NO_MATCH
        errors.append(ExportError.for_kind(kind, request.product_id))
        return []

    async def _build_items(
        self,
        products: list[Product],
        context: StorefrontContext,
        request: ExportRequest,
        base_url: str,
        errors: list[ExportError],
        log: structlog.stdlib.BoundLogger,
    ) -> list[ExportItem]:
        """Build an item per product, skipping invalid products."""
        if not products:
            return []

        hierarchy = CategoryHierarchy(self.categories, context.navigation_category_id)
        item_builder = ItemBuilder(
            UrlBuilder(context, Router(base_url), hierarchy),
            hierarchy,
            request.shopkey,
            await self.customer_groups.list_all(),
        )

        items = []
        for product in products:
            try:
                items.append(await item_builder.build(product))
            except ProductInvalidError as e:
                log.warning(
                    "Product skipped",
                    product_id=e.product_id,
                    kind=e.kind.value,
                    reason=e.message,
                )
                # Only a targeted export reports item failures to the caller
                if request.targets_product:
                    errors.append(ExportError.from_product_error(e))
        return items

    def _advance(
        self,
        progress: ExportProgress,
        stage: ExportStage,
        log: structlog.stdlib.BoundLogger,
    ) -> None:
        previous = progress.stage
        progress.advance(stage)
        log.debug("Export stage changed", from_stage=previous.value, to_stage=stage.value)
