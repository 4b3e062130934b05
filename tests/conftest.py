"""Shared fixtures: a temporary catalog database, seed helpers and the
API test client.

Async tests use the ``session`` and ``catalog`` fixtures. API tests are
synchronous, seed through ``seed`` and call the app through ``client``,
which serves requests from the same temporary database.
"""

import asyncio
from collections.abc import AsyncGenerator, Awaitable, Callable, Generator
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from searchfeed.catalog.models import (
    CategoryModel,
    CustomerGroupModel,
    ProductMediaModel,
    ProductModel,
    ProductPriceModel,
    ProductPropertyModel,
    ProductVisibilityModel,
    SalesChannelDomainModel,
    SalesChannelModel,
    SeoUrlModel,
)
from searchfeed.domain.entities import ProductVisibility
from searchfeed.infrastructure.config import settings
from searchfeed.infrastructure.database import create_schema, get_session
from searchfeed.infrastructure.system_config import SystemConfigModel, config_key
from searchfeed.main import app

SALES_CHANNEL_ID = settings.default_sales_channel_id
LANGUAGE_ID = "2fbb5fe2e29a4d70aa5854ce7ce3e20b"
OTHER_LANGUAGE_ID = "0d1b5b6a0d0c4b45a0a3d0f1a3a4e0c2"
ROOT_CATEGORY_ID = "a515ae260223466f8e37471d279e6406"
MEN_CATEGORY_ID = "4e43b925d5ec43339d2b3414a91151ab"
SHIRTS_CATEGORY_ID = "8c2b4ec8d8e44e6a9c0d7a37d0a1f5b3"
CUSTOMER_GROUP_ID = "cfbd5018d38d41d8adca10d94fc8bdd6"
SHOPKEY = "ABCDABCDABCDABCDABCDABCDABCDABCD"
SHOP_DOMAIN = "https://shop.example.com"


class CatalogSeeder:
    """Inserts catalog rows for tests.

    ``standard()`` creates a sales channel with a domain per language,
    the category tree "Catalogue #1 > Men > Shirts", a net price
    customer group and the shopkey binding. ``product()`` adds a product
    that exports cleanly unless told otherwise.
    """

    sales_channel_id = SALES_CHANNEL_ID
    language_id = LANGUAGE_ID
    other_language_id = OTHER_LANGUAGE_ID
    root_category_id = ROOT_CATEGORY_ID
    men_category_id = MEN_CATEGORY_ID
    shirts_category_id = SHIRTS_CATEGORY_ID
    customer_group_id = CUSTOMER_GROUP_ID
    shopkey = SHOPKEY
    shop_domain = SHOP_DOMAIN

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._created_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self._product_count = 0

    async def standard(self) -> None:
        await self.sales_channel()
        await self.category("Catalogue #1", category_id=ROOT_CATEGORY_ID)
        await self.category(
            "Men",
            parent_id=ROOT_CATEGORY_ID,
            category_id=MEN_CATEGORY_ID,
            seo_paths=["Men/"],
        )
        await self.category(
            "Shirts",
            parent_id=MEN_CATEGORY_ID,
            category_id=SHIRTS_CATEGORY_ID,
            seo_paths=["Men/Shirts/"],
        )
        await self.customer_group(CUSTOMER_GROUP_ID, "Net customers", display_gross=False)
        await self.bind_shopkey(SHOPKEY, SALES_CHANNEL_ID)

    async def sales_channel(
        self,
        sales_channel_id: str = SALES_CHANNEL_ID,
        domains: list[tuple[str, str]] | None = None,
        navigation_category_id: str | None = ROOT_CATEGORY_ID,
    ) -> SalesChannelModel:
        if domains is None:
            domains = [(SHOP_DOMAIN, LANGUAGE_ID), (f"{SHOP_DOMAIN}/en", OTHER_LANGUAGE_ID)]
        model = SalesChannelModel(
            id=sales_channel_id,
            name="Storefront",
            language_id=LANGUAGE_ID,
            navigation_category_id=navigation_category_id,
            domains=[
                SalesChannelDomainModel(url=url, language_id=language_id, position=position)
                for position, (url, language_id) in enumerate(domains)
            ],
        )
        self.session.add(model)
        await self.session.flush()
        return model

    async def category(
        self,
        name: str | None,
        parent_id: str | None = None,
        category_id: str | None = None,
        seo_paths: list[str] | None = None,
    ) -> CategoryModel:
        model = CategoryModel(
            name=name,
            parent_id=parent_id,
            seo_urls=[
                self._seo_url(path, position) for position, path in enumerate(seo_paths or [])
            ],
        )
        if category_id:
            model.id = category_id
        self.session.add(model)
        await self.session.flush()
        return model

    async def customer_group(
        self,
        customer_group_id: str,
        name: str,
        display_gross: bool = True,
    ) -> CustomerGroupModel:
        model = CustomerGroupModel(id=customer_group_id, name=name, display_gross=display_gross)
        self.session.add(model)
        await self.session.flush()
        return model

    async def bind_shopkey(self, shopkey: str, sales_channel_id: str | None) -> None:
        self.session.add(
            SystemConfigModel(
                configuration_key=config_key("shopkey"),
                configuration_value=shopkey,
                sales_channel_id=sales_channel_id,
            )
        )
        await self.session.flush()

    async def setting(self, name: str, value, sales_channel_id: str | None = None) -> None:
        self.session.add(
            SystemConfigModel(
                configuration_key=config_key(name),
                configuration_value=value,
                sales_channel_id=sales_channel_id,
            )
        )
        await self.session.flush()

    async def product(
        self,
        product_number: str | None = "SW10001",
        name: str | None = "Main product",
        product_id: str | None = None,
        ean: str | None = None,
        manufacturer_number: str | None = None,
        manufacturer: str | None = "FINDOLOGIC",
        category_ids: list[str] | None = None,
        prices: list[tuple[str, str, str | None]] | None = None,
        visibility: ProductVisibility | None = ProductVisibility.ALL,
        seo_paths: list[str] | None = None,
        properties: list[tuple[str, str]] | None = None,
        media: list[str] | None = None,
        parent_id: str | None = None,
        active: bool = True,
    ) -> ProductModel:
        """Add a product.

        Prices are (gross, net, customer_group_id) triples; the default is
        a single group-less price. The first SEO path is canonical.
        """
        if category_ids is None:
            category_ids = [SHIRTS_CATEGORY_ID]
        if prices is None:
            prices = [("19.99", "16.80", None)]

        categories = [await self.session.get(CategoryModel, cid) for cid in category_ids]
        self._product_count += 1

        model = ProductModel(
            product_number=product_number,
            name=name,
            description="Product description",
            ean=ean,
            manufacturer_number=manufacturer_number,
            manufacturer=manufacturer,
            parent_id=parent_id,
            active=active,
            created_at=self._created_at + timedelta(minutes=self._product_count),
            categories=categories,
            prices=[
                ProductPriceModel(
                    gross=Decimal(gross),
                    net=Decimal(net),
                    customer_group_id=group_id,
                )
                for gross, net, group_id in prices
            ],
            visibilities=(
                [ProductVisibilityModel(sales_channel_id=SALES_CHANNEL_ID, visibility=int(visibility))]
                if visibility is not None
                else []
            ),
            seo_urls=[
                self._seo_url(path, position, is_canonical=position == 0)
                for position, path in enumerate(seo_paths or [])
            ],
            properties=[
                ProductPropertyModel(group_name=group, option_name=option, position=position)
                for position, (group, option) in enumerate(properties or [])
            ],
            media=[
                ProductMediaModel(url=url, position=position)
                for position, url in enumerate(media or [])
            ],
        )
        if product_id:
            model.id = product_id
        self.session.add(model)
        await self.session.flush()
        return model

    def _seo_url(self, path: str, position: int, is_canonical: bool = False) -> SeoUrlModel:
        return SeoUrlModel(
            language_id=LANGUAGE_ID,
            sales_channel_id=SALES_CHANNEL_ID,
            seo_path_info=path,
            is_canonical=is_canonical,
            position=position,
        )


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """SQLite file database, one per test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}"


@pytest_asyncio.fixture
async def engine(database_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """Engine with the schema created."""
    engine = create_async_engine(database_url, poolclass=NullPool)
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Session on the temporary database."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def catalog(session: AsyncSession) -> CatalogSeeder:
    """Seed helper bound to the test session."""
    return CatalogSeeder(session)


# ============================================================================
# API Fixtures
# ============================================================================


@pytest.fixture
def session_factory(database_url: str) -> Generator[async_sessionmaker, None, None]:
    """Session factory for synchronous API tests."""
    engine = create_async_engine(database_url, poolclass=NullPool)
    asyncio.run(create_schema(engine))
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    asyncio.run(engine.dispose())


@pytest.fixture
def seed(
    session_factory: async_sessionmaker,
) -> Callable[[Callable[[CatalogSeeder], Awaitable[None]]], None]:
    """Run an async seeding function and commit its rows.

    Example:
        async def populate(catalog):
            await catalog.standard()
            await catalog.product()

        seed(populate)
    """

    def run(populate: Callable[[CatalogSeeder], Awaitable[None]]) -> None:
        async def _run() -> None:
            async with session_factory() as session:
                await populate(CatalogSeeder(session))
                await session.commit()

        asyncio.run(_run())

    return run


@pytest.fixture
def client(session_factory: async_sessionmaker) -> Generator[TestClient, None, None]:
    """Test client serving requests from the temporary database."""

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()
