"""Storefront search result rewriting.

Hooks into the storefront's page and listing events: exposes the plugin
configuration to the page header and, for search and category pages,
replaces the storefront's product query with the ids ranked by the
external search service. When the service is unavailable the storefront
query is left untouched.
"""

from dataclasses import dataclass, field
from typing import Any

import structlog

from searchfeed.application.plugin_config import PluginConfig, PluginConfigLoader
from searchfeed.catalog.criteria import CatalogCriteria
from searchfeed.domain.exceptions import SearchServiceError, ServiceConfigError
from searchfeed.export.user_groups import calculate_user_group_hash
from searchfeed.infrastructure.search_client import (
    RequestType,
    SearchServiceClient,
    SearchServiceRequest,
)
from searchfeed.infrastructure.service_config import ServiceConfigResource

logger = structlog.get_logger()

CONFIG_EXTENSION = "searchFeedConfig"
SNIPPET_EXTENSION = "searchFeedSnippet"


# ============================================================================
# Events
# ============================================================================


@dataclass(frozen=True)
class StorefrontRequest:
    """Incoming storefront request.

    Attributes:
        params: Query parameters.
        shop_url: Host of the storefront.
        user_ip: Client IP of the shopper.
        referer: Referring page.
    """

    params: dict[str, str] = field(default_factory=dict)
    shop_url: str | None = None
    user_ip: str | None = None
    referer: str | None = None

    def get(self, name: str) -> str | None:
        return self.params.get(name)


@dataclass
class HeaderLoadedEvent:
    """Page header of a storefront page was loaded.

    Attributes:
        sales_channel_id: Channel of the page.
        customer_group_id: Customer group of the shopper.
        extensions: Data handed to the page template.
    """

    sales_channel_id: str
    customer_group_id: str
    extensions: dict[str, Any] = field(default_factory=dict)


@dataclass
class ProductCriteriaEvent:
    """Storefront is about to query products for a search or category page.

    Handlers may replace criteria.
    """

    sales_channel_id: str
    request: StorefrontRequest
    criteria: CatalogCriteria


@dataclass(frozen=True)
class Snippet:
    """Data for the search service's storefront snippet."""

    shopkey: str
    search_result_container: str
    navigation_result_container: str
    user_group_hash: str


# ============================================================================
# Subscriber
# ============================================================================


class StorefrontSearchSubscriber:
    """Rewrites storefront search and navigation results.

    Example usage:
        subscriber = StorefrontSearchSubscriber(loader, service_config, client)
        await subscriber.on_search(event)
        products = await repo.search(event.criteria)
    """

    def __init__(
        self,
        config_loader: PluginConfigLoader,
        service_config: ServiceConfigResource,
        search_client: SearchServiceClient,
    ) -> None:
        """Initialize subscriber.

        Args:
            config_loader: Loads the plugin configuration per channel.
            service_config: Remote service configuration.
            search_client: External search service client.
        """
        self.config_loader = config_loader
        self.service_config = service_config
        self.search_client = search_client

    async def on_header_loaded(self, event: HeaderLoadedEvent) -> None:
        """Attach the plugin configuration and snippet to the page.

        Args:
            event: Header event of the page.
        """
        config = await self.config_loader.load(event.sales_channel_id)
        event.extensions[CONFIG_EXTENSION] = config

        if config.active and config.shopkey:
            event.extensions[SNIPPET_EXTENSION] = Snippet(
                shopkey=config.shopkey,
                search_result_container=config.search_result_container,
                navigation_result_container=config.navigation_result_container,
                user_group_hash=calculate_user_group_hash(
                    config.shopkey, event.customer_group_id
                ),
            )

    async def on_search(self, event: ProductCriteriaEvent) -> None:
        """Replace the search criteria with the service's results.

        Args:
            event: Search criteria event.
        """
        config = await self._load_served_config(event.sales_channel_id)
        if config is None:
            return

        request = SearchServiceRequest(
            request_type=RequestType.SEARCH,
            query=event.request.get("search") or "",
            shop_url=event.request.shop_url,
            user_ip=event.request.user_ip,
            referer=event.request.referer,
        )
        await self._apply_results(event, request, config.shopkey)

    async def on_navigation(self, event: ProductCriteriaEvent) -> None:
        """Replace the category listing criteria with the service's results.

        Only category pages (with a catFilter parameter) are rewritten.

        Args:
            event: Listing criteria event.
        """
        config = await self._load_served_config(event.sales_channel_id)
        if config is None:
            return

        category = event.request.get("catFilter")
        if not category:
            return

        request = SearchServiceRequest(
            request_type=RequestType.NAVIGATION,
            category=category,
            shop_url=event.request.shop_url,
            user_ip=event.request.user_ip,
            referer=event.request.referer,
        )
        await self._apply_results(event, request, config.shopkey)

    async def _load_served_config(self, sales_channel_id: str) -> PluginConfig | None:
        """Get the configuration if results should be rewritten.

        Returns:
            Config of an active API-integrated live shop, None otherwise.
        """
        config = await self.config_loader.load(sales_channel_id)
        if not config.active or not config.shopkey:
            return None

        try:
            if await self.service_config.is_direct_integration(config.shopkey):
                return None
            if await self.service_config.is_staging(config.shopkey):
                return None
        except ServiceConfigError as e:
            logger.warning(
                "Service config unavailable, keeping storefront results",
                shopkey=config.shopkey,
                error=e.message,
            )
            return None

        return config

    async def _apply_results(
        self,
        event: ProductCriteriaEvent,
        request: SearchServiceRequest,
        shopkey: str,
    ) -> None:
        try:
            response = await self.search_client.send(request, shopkey)
        except SearchServiceError as e:
            logger.warning(
                "Search service failed, keeping storefront results",
                shopkey=shopkey,
                error=e.message,
            )
            return

        event.criteria = CatalogCriteria.for_ids(response.product_ids)
