"""Tests for loading the plugin configuration."""

import httpx
import pytest

from searchfeed.application.plugin_config import (
    DEFAULT_NAVIGATION_RESULT_CONTAINER,
    DEFAULT_SEARCH_RESULT_CONTAINER,
    IntegrationType,
    PluginConfigLoader,
)
from searchfeed.infrastructure.service_config import ServiceConfigResource
from searchfeed.infrastructure.system_config import SystemConfigService, config_key

CHANNEL_ID = "98432def39fc4624b33213a56b8c944d"
SHOPKEY = "ABCDABCDABCDABCDABCDABCDABCDABCD"


def make_service_config(payload=None, status_code: int = 200) -> ServiceConfigResource:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload or {})

    return ServiceConfigResource(
        base_url="https://cdn.example.com/static",
        transport=httpx.MockTransport(handler),
    )


class TestPluginConfigLoader:
    """Tests for PluginConfigLoader."""

    @pytest.mark.asyncio
    async def test_defaults(self, session) -> None:
        loader = PluginConfigLoader(SystemConfigService(session), make_service_config())

        config = await loader.load(CHANNEL_ID)

        assert config.active is False
        assert config.shopkey is None
        assert config.search_result_container == DEFAULT_SEARCH_RESULT_CONTAINER
        assert config.navigation_result_container == DEFAULT_NAVIGATION_RESULT_CONTAINER
        assert config.integration_type is None
        assert config.filter_position == "top"

    @pytest.mark.asyncio
    async def test_blank_values_use_defaults(self, catalog, session) -> None:
        await catalog.setting("searchResultContainer", "  ", CHANNEL_ID)

        loader = PluginConfigLoader(SystemConfigService(session), make_service_config())
        config = await loader.load(CHANNEL_ID)

        assert config.search_result_container == DEFAULT_SEARCH_RESULT_CONTAINER

    @pytest.mark.asyncio
    async def test_channel_settings(self, catalog, session) -> None:
        await catalog.setting("active", True, CHANNEL_ID)
        await catalog.setting("shopkey", SHOPKEY, CHANNEL_ID)
        await catalog.setting("activeOnCategoryPages", True, CHANNEL_ID)
        await catalog.setting("crossSellingCategories", ["c1"], CHANNEL_ID)
        await catalog.setting("filterPosition", "left")

        loader = PluginConfigLoader(SystemConfigService(session), make_service_config())
        config = await loader.load(CHANNEL_ID)

        assert config.active is True
        assert config.shopkey == SHOPKEY
        assert config.active_on_category_pages is True
        assert config.cross_selling_categories == ("c1",)
        assert config.filter_position == "left"
        assert config.to_dict()["crossSellingCategories"] == ["c1"]

    @pytest.mark.asyncio
    async def test_syncs_readonly_settings(self, catalog, session) -> None:
        await catalog.setting("active", True, CHANNEL_ID)
        await catalog.setting("shopkey", SHOPKEY, CHANNEL_ID)
        system_config = SystemConfigService(session)
        loader = PluginConfigLoader(
            system_config,
            make_service_config({"directIntegration": {"enabled": True}, "isStagingShop": True}),
        )

        config = await loader.load(CHANNEL_ID)

        assert config.integration_type == IntegrationType.DIRECT_INTEGRATION.value
        assert config.staging is True
        assert await system_config.get(config_key("integrationType"), CHANNEL_ID) == (
            "Direct Integration"
        )
        assert await system_config.get(config_key("isStaging"), CHANNEL_ID) is True

    @pytest.mark.asyncio
    async def test_api_integration(self, catalog, session) -> None:
        await catalog.setting("active", True, CHANNEL_ID)
        await catalog.setting("shopkey", SHOPKEY, CHANNEL_ID)

        loader = PluginConfigLoader(SystemConfigService(session), make_service_config({}))
        config = await loader.load(CHANNEL_ID)

        assert config.integration_type == IntegrationType.API.value
        assert config.staging is False

    @pytest.mark.asyncio
    async def test_remote_config_unavailable(self, catalog, session) -> None:
        await catalog.setting("active", True, CHANNEL_ID)
        await catalog.setting("shopkey", SHOPKEY, CHANNEL_ID)
        system_config = SystemConfigService(session)

        loader = PluginConfigLoader(system_config, make_service_config(status_code=503))
        config = await loader.load(CHANNEL_ID)

        assert config.integration_type is None
        assert config.staging is False
        assert await system_config.get(config_key("integrationType"), CHANNEL_ID) is None

    @pytest.mark.asyncio
    async def test_inactive_skips_remote_config(self, catalog, session) -> None:
        await catalog.setting("shopkey", SHOPKEY, CHANNEL_ID)
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={})

        resource = ServiceConfigResource(
            base_url="https://cdn.example.com/static",
            transport=httpx.MockTransport(handler),
        )
        config = await PluginConfigLoader(SystemConfigService(session), resource).load(
            CHANNEL_ID
        )

        assert config.active is False
        assert calls == []
