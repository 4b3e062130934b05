"""Plugin configuration.

Loads the per-channel plugin settings from the settings store into an
immutable value and keeps the read-only settings (integration type and
staging flag) in sync with the remote service configuration.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

from searchfeed.domain.exceptions import ServiceConfigError
from searchfeed.infrastructure.service_config import ServiceConfigResource
from searchfeed.infrastructure.system_config import SystemConfigService, config_key

logger = structlog.get_logger()

DEFAULT_SEARCH_RESULT_CONTAINER = "sf-result"
DEFAULT_NAVIGATION_RESULT_CONTAINER = "sf-navigation-result"


class IntegrationType(str, Enum):
    """How the storefront integrates the search service."""

    DIRECT_INTEGRATION = "Direct Integration"
    API = "API"


class FilterPosition(str, Enum):
    """Where filters are rendered on result pages."""

    TOP = "top"
    LEFT = "left"


@dataclass(frozen=True)
class PluginConfig:
    """Plugin settings of one sales channel.

    Attributes:
        shopkey: Shopkey of the channel, None if not configured.
        active: Whether the search service is enabled.
        staging: Whether the shop is a staging shop.
        active_on_category_pages: Whether category pages are served too.
        cross_selling_categories: Categories excluded from results.
        search_result_container: DOM container of search results.
        navigation_result_container: DOM container of category results.
        integration_type: Integration type, None if unknown.
        filter_position: Filter placement.
    """

    shopkey: str | None = None
    active: bool = False
    staging: bool = False
    active_on_category_pages: bool = False
    cross_selling_categories: tuple[str, ...] = ()
    search_result_container: str = DEFAULT_SEARCH_RESULT_CONTAINER
    navigation_result_container: str = DEFAULT_NAVIGATION_RESULT_CONTAINER
    integration_type: str | None = None
    filter_position: str = FilterPosition.TOP.value

    def to_dict(self) -> dict[str, Any]:
        """Convert to a template-friendly dict."""
        return {
            "shopkey": self.shopkey,
            "active": self.active,
            "staging": self.staging,
            "activeOnCategoryPages": self.active_on_category_pages,
            "crossSellingCategories": list(self.cross_selling_categories),
            "searchResultContainer": self.search_result_container,
            "navigationResultContainer": self.navigation_result_container,
            "integrationType": self.integration_type,
            "filterPosition": self.filter_position,
        }


class PluginConfigLoader:
    """Builds plugin configurations.

    Example usage:
        loader = PluginConfigLoader(SystemConfigService(session), ServiceConfigResource())
        config = await loader.load(sales_channel_id)
        if config.active:
            ...
    """

    def __init__(
        self,
        system_config: SystemConfigService,
        service_config: ServiceConfigResource,
    ) -> None:
        """Initialize loader.

        Args:
            system_config: Settings store.
            service_config: Remote service configuration.
        """
        self.system_config = system_config
        self.service_config = service_config

    async def load(self, sales_channel_id: str | None) -> PluginConfig:
        """Load the plugin configuration of a sales channel.

        Args:
            sales_channel_id: Channel to load for, None for global settings.

        Returns:
            Plugin configuration.
        """
        active = bool(await self._get(sales_channel_id, "active", False))
        shopkey = await self._get(sales_channel_id, "shopkey")

        integration_type = None
        staging = False
        if active and shopkey:
            integration_type, staging = await self._sync_readonly_config(
                sales_channel_id, shopkey
            )

        return PluginConfig(
            shopkey=shopkey,
            active=active,
            staging=staging,
            active_on_category_pages=bool(
                await self._get(sales_channel_id, "activeOnCategoryPages", False)
            ),
            cross_selling_categories=tuple(
                await self._get(sales_channel_id, "crossSellingCategories", [])
            ),
            search_result_container=await self._get(
                sales_channel_id, "searchResultContainer", DEFAULT_SEARCH_RESULT_CONTAINER
            ),
            navigation_result_container=await self._get(
                sales_channel_id,
                "navigationResultContainer",
                DEFAULT_NAVIGATION_RESULT_CONTAINER,
            ),
            integration_type=integration_type,
            filter_position=await self._get(
                sales_channel_id, "filterPosition", FilterPosition.TOP.value
            ),
        )

    async def _sync_readonly_config(
        self,
        sales_channel_id: str | None,
        shopkey: str,
    ) -> tuple[str | None, bool]:
        """Read integration type and staging flag from the remote config.

        Stored values that differ from the remote ones are overwritten.

        Returns:
            Integration type and staging flag; (None, False) if the
            remote configuration is unavailable.
        """
        try:
            is_direct_integration = await self.service_config.is_direct_integration(shopkey)
            is_staging = await self.service_config.is_staging(shopkey)
        except ServiceConfigError as e:
            logger.warning(
                "Service config unavailable",
                shopkey=shopkey,
                error=e.message,
            )
            return None, False

        integration_type = (
            IntegrationType.DIRECT_INTEGRATION.value
            if is_direct_integration
            else IntegrationType.API.value
        )

        integration_key = config_key("integrationType")
        if await self.system_config.get(integration_key, sales_channel_id) != integration_type:
            await self.system_config.set(integration_key, integration_type, sales_channel_id)

        staging_key = config_key("isStaging")
        if await self.system_config.get(staging_key, sales_channel_id) != is_staging:
            await self.system_config.set(staging_key, is_staging, sales_channel_id)

        return integration_type, is_staging

    async def _get(self, sales_channel_id: str | None, name: str, default: Any = None) -> Any:
        """Get a setting, using the default for unset or blank values."""
        value = await self.system_config.get(config_key(name), sales_channel_id)
        if value is None or (isinstance(value, str) and not value.strip()):
            return default
        return value
