"""Catalog entities.

Read-only snapshots of the storefront's catalog as handed out by the
repositories. The export pipeline never mutates them.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import IntEnum
from typing import Any

from searchfeed.domain.base import Entity, ValueObject


class ProductVisibility(IntEnum):
    """Visibility level of a product within a sales channel.

    Higher levels include the lower ones.
    """

    LINK = 10
    SEARCH = 20
    ALL = 30


# ============================================================================
# Sales Channel
# ============================================================================


@dataclass(frozen=True, eq=False, kw_only=True)
class SalesChannelDomain(Entity[str]):
    """A public domain of a sales channel for one language.

    Attributes:
        url: Absolute base URL, possibly with a path (e.g. "https://shop.com/de").
        language_id: Language served under this domain.
    """

    url: str
    language_id: str


@dataclass(frozen=True, eq=False, kw_only=True)
class SalesChannel(Entity[str]):
    """A storefront's sales/distribution context.

    Attributes:
        name: Display name.
        language_id: Default language of the channel.
        navigation_category_id: Root category of the channel's navigation.
        domains: Configured domains, in configuration order.
    """

    name: str
    language_id: str
    navigation_category_id: str | None = None
    domains: tuple[SalesChannelDomain, ...] = ()


# ============================================================================
# SEO URLs and Categories
# ============================================================================


@dataclass(frozen=True, eq=False, kw_only=True)
class SeoUrl(Entity[str]):
    """A human-readable path configured for a product or category.

    Attributes:
        language_id: Language the path belongs to.
        sales_channel_id: Channel the path belongs to.
        seo_path_info: Path without domain (e.g. "Men/Shirts/").
        is_canonical: Whether this is the preferred path.
        is_deleted: Soft-deleted paths are never exported.
    """

    language_id: str
    sales_channel_id: str | None
    seo_path_info: str
    is_canonical: bool = False
    is_deleted: bool = False


@dataclass(frozen=True, eq=False, kw_only=True)
class Category(Entity[str]):
    """A category of the catalog.

    Attributes:
        name: Category name in the channel language.
        parent_id: Parent category, None for a tree root.
        seo_urls: SEO URL candidates.
    """

    name: str | None = None
    parent_id: str | None = None
    seo_urls: tuple[SeoUrl, ...] = ()


# ============================================================================
# Customer Groups
# ============================================================================


@dataclass(frozen=True, eq=False, kw_only=True)
class CustomerGroup(Entity[str]):
    """A customer group prices can be scoped to.

    Attributes:
        name: Display name.
        display_gross: Whether the group is shown gross prices.
    """

    name: str
    display_gross: bool = True


# ============================================================================
# Products
# ============================================================================


@dataclass(frozen=True)
class ProductPrice(ValueObject):
    """Price of a product, optionally scoped to a customer group.

    Attributes:
        gross: Price including tax.
        net: Price excluding tax.
        customer_group_id: Group the price applies to, None for the default price.
        currency: ISO currency code.
    """

    gross: Decimal
    net: Decimal
    customer_group_id: str | None = None
    currency: str = "EUR"

    def for_display(self, display_gross: bool) -> Decimal:
        """Get the price shown to a customer group.

        Args:
            display_gross: Whether the group sees gross prices.

        Returns:
            Gross or net value.
        """
        return self.gross if display_gross else self.net


@dataclass(frozen=True)
class ProductAttribute(ValueObject):
    """A named product property with one or more values."""

    name: str
    values: tuple[str, ...]


@dataclass(frozen=True)
class ProductMedia(ValueObject):
    """An image assigned to a product."""

    url: str
    position: int = 0


@dataclass(frozen=True, eq=False, kw_only=True)
class Product(Entity[str]):
    """A product of the catalog.

    Attributes:
        product_number: SKU.
        name: Product name in the channel language.
        description: Long description.
        ean: European article number.
        manufacturer_number: Manufacturer's part number.
        manufacturer: Manufacturer name.
        parent_id: Parent product for variants, None for main products.
        active: Whether the product is active.
        categories: Assigned categories.
        seo_urls: SEO URL candidates.
        prices: Default and customer-group-scoped prices.
        attributes: Product properties.
        media: Images.
        created_at: Creation timestamp.
    """

    product_number: str | None = None
    name: str | None = None
    description: str | None = None
    ean: str | None = None
    manufacturer_number: str | None = None
    manufacturer: str | None = None
    parent_id: str | None = None
    active: bool = True
    categories: tuple[Category, ...] = ()
    seo_urls: tuple[SeoUrl, ...] = ()
    prices: tuple[ProductPrice, ...] = ()
    attributes: tuple[ProductAttribute, ...] = ()
    media: tuple[ProductMedia, ...] = ()
    created_at: datetime | None = None

    def price_for(self, customer_group_id: str | None) -> ProductPrice | None:
        """Get the price for a customer group.

        Falls back to the default price when the group has no own price.

        Args:
            customer_group_id: Customer group, None for the default price.

        Returns:
            Matching price, None if neither a group nor a default price exists.
        """
        default = None
        for price in self.prices:
            if price.customer_group_id == customer_group_id:
                return price
            if price.customer_group_id is None and default is None:
                default = price
        return default


# ============================================================================
# System Configuration
# ============================================================================


@dataclass(frozen=True, eq=False, kw_only=True)
class SystemConfigEntry(Entity[int]):
    """A key/value setting, global or scoped to a sales channel."""

    configuration_key: str
    configuration_value: Any
    sales_channel_id: str | None = None
