"""Remote per-shop service configuration.

The search service publishes a config.json per shopkey that tells
whether the shop uses the direct integration and whether it is a
staging shop.
"""

from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from searchfeed.domain.exceptions import ServiceConfigError
from searchfeed.infrastructure.config import settings

logger = structlog.get_logger()


@dataclass(frozen=True)
class ServiceConfig:
    """Remote configuration of one shop."""

    direct_integration: bool = False
    staging: bool = False

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "ServiceConfig":
        """Create from API response data."""
        direct_integration = data.get("directIntegration") or {}
        return cls(
            direct_integration=bool(direct_integration.get("enabled", False)),
            staging=bool(data.get("isStagingShop", False)),
        )


class ServiceConfigResource:
    """Reads the remote service configuration of shops.

    Configurations are cached for the lifetime of the resource.

    Example usage:
        resource = ServiceConfigResource()
        if await resource.is_direct_integration(shopkey):
            ...
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize resource.

        Args:
            base_url: Location of the per-shop configs, defaults to settings.
            timeout: Request timeout in seconds, defaults to settings.
            transport: Optional transport, used to stub the service.
        """
        self.base_url = (base_url or settings.service_config_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.search_timeout
        self.transport = transport
        self._cache: dict[str, ServiceConfig] = {}

    async def get_config(self, shopkey: str) -> ServiceConfig:
        """Get the configuration of a shop.

        Args:
            shopkey: Shop to look up.

        Returns:
            Remote configuration.

        Raises:
            ServiceConfigError: If the configuration cannot be fetched or parsed.
        """
        if shopkey in self._cache:
            return self._cache[shopkey]

        url = f"{self.base_url}/{shopkey}/config.json"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url)
        except httpx.HTTPError as e:
            logger.warning("Service config request failed", shopkey=shopkey, error=str(e))
            raise ServiceConfigError(shopkey, f"Request failed: {str(e)}") from e

        if response.status_code != 200:
            raise ServiceConfigError(
                shopkey,
                f"Service config returned status {response.status_code}",
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ServiceConfigError(shopkey, "Service config is not valid JSON") from e
        if not isinstance(data, dict):
            raise ServiceConfigError(shopkey, "Service config is not a JSON object")

        config = ServiceConfig.from_api_response(data)
        self._cache[shopkey] = config
        return config

    async def is_direct_integration(self, shopkey: str) -> bool:
        return (await self.get_config(shopkey)).direct_integration

    async def is_staging(self, shopkey: str) -> bool:
        return (await self.get_config(shopkey)).staging
