"""Tests for the remote per-shop service configuration."""

import httpx
import pytest

from searchfeed.domain.exceptions import ServiceConfigError
from searchfeed.infrastructure.service_config import ServiceConfig, ServiceConfigResource

BASE_URL = "https://cdn.example.com/static"
SHOPKEY = "ABCDABCDABCDABCDABCDABCDABCDABCD"


def make_resource(handler) -> ServiceConfigResource:
    return ServiceConfigResource(base_url=BASE_URL, transport=httpx.MockTransport(handler))


class TestServiceConfig:
    def test_from_api_response(self) -> None:
        config = ServiceConfig.from_api_response(
            {"directIntegration": {"enabled": True}, "isStagingShop": True}
        )

        assert config.direct_integration is True
        assert config.staging is True

    def test_defaults(self) -> None:
        config = ServiceConfig.from_api_response({})

        assert config.direct_integration is False
        assert config.staging is False


class TestServiceConfigResource:
    """Tests for ServiceConfigResource."""

    @pytest.mark.asyncio
    async def test_fetches_config_of_shop(self) -> None:
        requested: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, json={"isStagingShop": True})

        resource = make_resource(handler)

        assert await resource.is_staging(SHOPKEY) is True
        assert await resource.is_direct_integration(SHOPKEY) is False
        assert requested == [f"{BASE_URL}/{SHOPKEY}/config.json"]

    @pytest.mark.asyncio
    async def test_error_status(self) -> None:
        resource = make_resource(lambda request: httpx.Response(404))

        with pytest.raises(ServiceConfigError) as exc_info:
            await resource.get_config(SHOPKEY)

        assert exc_info.value.shopkey == SHOPKEY

    @pytest.mark.asyncio
    async def test_not_json(self) -> None:
        resource = make_resource(lambda request: httpx.Response(200, text="nope"))

        with pytest.raises(ServiceConfigError, match="not valid JSON"):
            await resource.get_config(SHOPKEY)

    @pytest.mark.asyncio
    async def test_not_an_object(self) -> None:
        resource = make_resource(lambda request: httpx.Response(200, json=[1, 2]))

        with pytest.raises(ServiceConfigError, match="not a JSON object"):
            await resource.get_config(SHOPKEY)

    @pytest.mark.asyncio
    async def test_unreachable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(ServiceConfigError, match="Request failed"):
            await make_resource(handler).get_config(SHOPKEY)
