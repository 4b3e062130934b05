"""Tests for the key/value settings store."""

import pytest

from searchfeed.infrastructure.system_config import (
    SystemConfigRepository,
    SystemConfigService,
    config_key,
)

CHANNEL_ID = "98432def39fc4624b33213a56b8c944d"


class TestSystemConfigService:
    """Tests for SystemConfigService."""

    @pytest.mark.asyncio
    async def test_unset_key(self, session) -> None:
        assert await SystemConfigService(session).get(config_key("shopkey")) is None

    @pytest.mark.asyncio
    async def test_global_value(self, catalog, session) -> None:
        await catalog.setting("searchResultContainer", "results")

        service = SystemConfigService(session)

        assert await service.get(config_key("searchResultContainer")) == "results"
        assert await service.get(config_key("searchResultContainer"), CHANNEL_ID) == "results"

    @pytest.mark.asyncio
    async def test_channel_value_wins(self, catalog, session) -> None:
        await catalog.setting("active", False)
        await catalog.setting("active", True, CHANNEL_ID)

        service = SystemConfigService(session)

        assert await service.get(config_key("active"), CHANNEL_ID) is True
        assert await service.get(config_key("active")) is False

    @pytest.mark.asyncio
    async def test_set_inserts_then_updates(self, session) -> None:
        service = SystemConfigService(session)
        key = config_key("isStaging")

        await service.set(key, True, CHANNEL_ID)
        await service.set(key, False, CHANNEL_ID)

        entries = await SystemConfigRepository(session).find_by_key(key)
        assert len(entries) == 1
        assert entries[0].configuration_value is False
        assert entries[0].sales_channel_id == CHANNEL_ID

    @pytest.mark.asyncio
    async def test_json_values(self, session) -> None:
        service = SystemConfigService(session)
        key = config_key("crossSellingCategories")

        await service.set(key, ["c1", "c2"])

        assert await service.get(key) == ["c1", "c2"]


class TestSystemConfigRepository:
    @pytest.mark.asyncio
    async def test_find_by_key_in_insertion_order(self, catalog, session) -> None:
        await catalog.bind_shopkey("FIRST", CHANNEL_ID)
        await catalog.bind_shopkey("SECOND", None)

        entries = await SystemConfigRepository(session).find_by_key(config_key("shopkey"))

        assert [e.configuration_value for e in entries] == ["FIRST", "SECOND"]

    def test_config_key(self) -> None:
        assert config_key("shopkey") == "SearchFeed.config.shopkey"
