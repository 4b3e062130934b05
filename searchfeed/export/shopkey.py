"""Shopkey to storefront context resolution."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from searchfeed.catalog.repository import SalesChannelRepository
from searchfeed.domain.exceptions import StorefrontContextError, UnknownShopkeyError
from searchfeed.domain.value_objects import StorefrontContext
from searchfeed.infrastructure.system_config import SystemConfigRepository, config_key

logger = structlog.get_logger()

SHOPKEY_CONFIG_KEY = config_key("shopkey")


class StorefrontContextFactory:
    """Creates storefront contexts for sales channels."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize factory.

        Args:
            session: Async SQLAlchemy session.
        """
        self.sales_channels = SalesChannelRepository(session)

    async def create(
        self,
        token: str,
        sales_channel_id: str,
        customer_group_id: str | None = None,
    ) -> StorefrontContext:
        """Create a storefront context.

        Args:
            token: Context token of the caller.
            sales_channel_id: Sales channel to bind.
            customer_group_id: Current customer group, if any.

        Returns:
            New storefront context.

        Raises:
            StorefrontContextError: If the sales channel does not exist.
        """
        sales_channel = await self.sales_channels.get_by_id(sales_channel_id)
        if sales_channel is None:
            raise StorefrontContextError(sales_channel_id)

        return StorefrontContext(
            token=token,
            sales_channel=sales_channel,
            customer_group_id=customer_group_id,
        )


class ShopkeyResolver:
    """Maps a shopkey to the storefront context it is configured for.

    Example usage:
        resolver = ShopkeyResolver(SystemConfigRepository(session), factory)
        context = await resolver.resolve("ABCD0123", token, current_sales_channel_id)
    """

    def __init__(
        self,
        system_config: SystemConfigRepository,
        context_factory: StorefrontContextFactory,
    ) -> None:
        """Initialize resolver.

        Args:
            system_config: Settings rows holding the shopkey bindings.
            context_factory: Creates contexts for bound channels.
        """
        self.system_config = system_config
        self.context_factory = context_factory

    async def resolve(
        self,
        shopkey: str,
        token: str,
        current_sales_channel_id: str,
    ) -> StorefrontContext:
        """Resolve the storefront context of a shopkey.

        Bindings are scanned in insertion order and the first match wins.
        A binding without sales channel resolves to the caller's current
        sales channel.

        Args:
            shopkey: Shopkey of the export request.
            token: Context token of the caller.
            current_sales_channel_id: Sales channel of the caller.

        Returns:
            Storefront context of the bound channel.

        Raises:
            UnknownShopkeyError: If no binding carries the shopkey.
            StorefrontContextError: If the bound channel does not exist.
        """
        for entry in await self.system_config.find_by_key(SHOPKEY_CONFIG_KEY):
            if entry.configuration_value != shopkey:
                continue

            sales_channel_id = entry.sales_channel_id or current_sales_channel_id
            logger.debug(
                "Shopkey resolved",
                shopkey=shopkey,
                sales_channel_id=sales_channel_id,
            )
            return await self.context_factory.create(token, sales_channel_id)

        raise UnknownShopkeyError(shopkey)
