"""Conversion of catalog products into export items.

A product that lacks data the search service requires is rejected with
a ProductInvalidError whose kind names the missing data. Rejections are
scoped to the product and never touch the input entities.
"""

from searchfeed.catalog.hierarchy import CategoryHierarchy
from searchfeed.domain.entities import Category, CustomerGroup, Product
from searchfeed.domain.exceptions import ExportErrorKind, ProductInvalidError
from searchfeed.domain.value_objects import ExportItem, ItemAttribute, ItemPrice
from searchfeed.export.url_builder import UrlBuilder, unique
from searchfeed.export.user_groups import calculate_user_group_hash

CATEGORY_ATTRIBUTE = "cat"
CATEGORY_URL_ATTRIBUTE = "cat_url"
VENDOR_ATTRIBUTE = "vendor"

# Separator of category names in a category path (e.g. "Men_Shirts")
CATEGORY_PATH_SEPARATOR = "_"


class ItemBuilder:
    """Builds export items for one export call.

    Example usage:
        builder = ItemBuilder(url_builder, hierarchy, shopkey, customer_groups)
        try:
            item = await builder.build(product)
        except ProductInvalidError as e:
            logger.warning("Product skipped", kind=e.kind.value)
    """

    def __init__(
        self,
        url_builder: UrlBuilder,
        hierarchy: CategoryHierarchy,
        shopkey: str,
        customer_groups: list[CustomerGroup],
    ) -> None:
        """Initialize item builder.

        Args:
            url_builder: Resolves product and category URLs.
            hierarchy: Category ancestor lookups.
            shopkey: Shopkey the feed is built for.
            customer_groups: Customer groups to export prices and user group
                hashes for.
        """
        self.url_builder = url_builder
        self.hierarchy = hierarchy
        self.shopkey = shopkey
        self.customer_groups = customer_groups
        self._user_group_hashes = {
            group.id: calculate_user_group_hash(shopkey, group.id)
            for group in customer_groups
        }

    async def build(self, product: Product) -> ExportItem:
        """Build the export item of a product.

        Args:
            product: Product with prices, categories, SEO URLs, media
                and properties loaded.

        Returns:
            Export item.

        Raises:
            ProductInvalidError: If required data is missing.
        """
        if not product.attributes and not product.manufacturer:
            raise ProductInvalidError(ExportErrorKind.MISSING_ATTRIBUTES, product.id)
        if not product.name or not product.name.strip():
            raise ProductInvalidError(ExportErrorKind.MISSING_NAME, product.id)
        if not product.prices:
            raise ProductInvalidError(ExportErrorKind.MISSING_PRICES, product.id)
        if not product.categories:
            raise ProductInvalidError(ExportErrorKind.MISSING_CATEGORIES, product.id)
        if not product.product_number:
            raise ProductInvalidError(
                ExportErrorKind.MISSING_PROPERTY,
                product.id,
                field="product_number",
            )

        return ExportItem(
            id=product.id,
            name=product.name,
            url=self.url_builder.build_product_url(product),
            description=product.description,
            order_numbers=self._order_numbers(product),
            prices=self._prices(product),
            attributes=await self._attributes(product),
            images=tuple(
                media.url for media in sorted(product.media, key=lambda m: m.position)
            ),
            date_added=product.created_at,
            usergroups=tuple(self._user_group_hashes.values()),
        )

    def _order_numbers(self, product: Product) -> tuple[str, ...]:
        numbers = [product.product_number, product.ean, product.manufacturer_number]
        return tuple(unique([n for n in numbers if n]))

    def _prices(self, product: Product) -> tuple[ItemPrice, ...]:
        """Default price plus one price per customer group.

        Groups without their own price get the default price, shown gross
        or net depending on the group.
        """
        prices = []

        default = product.price_for(None)
        if default is not None:
            prices.append(ItemPrice(value=default.gross))

        for group in self.customer_groups:
            price = product.price_for(group.id)
            if price is None:
                continue
            prices.append(
                ItemPrice(
                    value=price.for_display(group.display_gross),
                    usergroup=self._user_group_hashes[group.id],
                )
            )

        return tuple(prices)

    async def _attributes(self, product: Product) -> tuple[ItemAttribute, ...]:
        category_paths: list[str] = []
        category_urls: list[str] = []
        for category in product.categories:
            path = await self._category_path(category)
            if path:
                category_paths.append(path)
            category_urls.extend(await self.url_builder.build_category_urls(category))

        attributes = []
        if category_paths:
            attributes.append(ItemAttribute(CATEGORY_ATTRIBUTE, tuple(unique(category_paths))))
        if category_urls:
            attributes.append(ItemAttribute(CATEGORY_URL_ATTRIBUTE, tuple(unique(category_urls))))
        if product.manufacturer:
            attributes.append(ItemAttribute(VENDOR_ATTRIBUTE, (product.manufacturer,)))
        for attribute in product.attributes:
            attributes.append(ItemAttribute(attribute.name, attribute.values))

        return tuple(attributes)

    async def _category_path(self, category: Category) -> str:
        """Join category names from the topmost exported ancestor down."""
        ancestors = await self.hierarchy.ancestors_of(category)
        names = [c.name for c in [*reversed(ancestors), category] if c.name]
        return CATEGORY_PATH_SEPARATOR.join(names)
