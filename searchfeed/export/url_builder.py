"""Public URL resolution for products and categories.

Product URLs prefer the SEO path of the active language and channel,
composed with the channel domain of that language. Without either, the
non-SEO detail route is used, so a product URL is never empty.

Examples:
    https://shop.example.com/Lightweight-Paper-Prior-IT/7562a1140f7f4abd8c6a4a4b6d050b77
    https://shop.example.com/detail/032c79962b3f4fb4bd1e9117005b42c1
    https://shop.example.com/de/Cooles-Produkt/c0421a8d8af840ecad60971ec5280476
"""

from urllib.parse import urlparse

from searchfeed.catalog.hierarchy import CategoryHierarchy
from searchfeed.domain.entities import Category, Product, SeoUrl
from searchfeed.domain.value_objects import StorefrontContext
from searchfeed.infrastructure.routing import NAVIGATION_ROUTE, PRODUCT_DETAIL_ROUTE, Router


def unique(values: list[str]) -> list[str]:
    """Remove duplicates, keeping the first occurrence."""
    return list(dict.fromkeys(values))


class UrlBuilder:
    """Builds product and category URLs for one storefront context.

    Example usage:
        builder = UrlBuilder(context, router, hierarchy)
        url = builder.build_product_url(product)
        cat_urls = await builder.build_category_urls(category)
    """

    def __init__(
        self,
        context: StorefrontContext,
        router: Router,
        hierarchy: CategoryHierarchy,
    ) -> None:
        """Initialize URL builder.

        Args:
            context: Storefront context of the export.
            router: Generates non-SEO routes.
            hierarchy: Category ancestor lookups.
        """
        self.context = context
        self.router = router
        self.hierarchy = hierarchy

    # ========================================================================
    # Products
    # ========================================================================

    def build_product_url(self, product: Product) -> str:
        """Build the public URL of a product.

        Args:
            product: Product with its SEO URLs.

        Returns:
            Absolute URL, the non-SEO detail URL if no SEO URL applies.
        """
        seo_path = self.get_product_seo_path(product)
        if not seo_path:
            return self._build_non_seo_url(product)

        domain = self.get_sales_channel_domain()
        if not domain:
            return self._build_non_seo_url(product)

        return f"{domain}/{seo_path}"

    def get_sales_channel_domain(self) -> str | None:
        """Get the channel domain of the active language.

        Returns:
            Domain URL without trailing slashes, None if none is configured.
        """
        for domain in self.context.domains:
            if domain.language_id == self.context.language_id:
                return domain.url.rstrip("/") or None
        return None

    def get_product_seo_path(self, product: Product) -> str | None:
        """Get the SEO path of a product without leading slashes.

        Canonical paths win; among several canonical paths the first in
        collection order is used.

        Args:
            product: Product with its SEO URLs.

        Returns:
            SEO path, None if no path matches language and channel.
        """
        candidates = self._applicable_seo_urls(product.seo_urls)
        if not candidates:
            return None

        seo_url = next((c for c in candidates if c.is_canonical), candidates[0])
        return seo_url.seo_path_info.lstrip("/") or None

    def _build_non_seo_url(self, product: Product) -> str:
        return self.router.generate_absolute_url(
            PRODUCT_DETAIL_ROUTE,
            {"productId": product.id},
        )

    # ========================================================================
    # Categories
    # ========================================================================

    async def build_category_urls(self, category: Category) -> list[str]:
        """Build the path URLs of a category and its ancestors.

        For a structure "Root > Men > Shirts > T-Shirts" this yields the
        navigation paths of T-Shirts, Shirts and Men, followed by their
        SEO paths, e.g. "/Men/Shirts/T-Shirts/", "/Men/Shirts/", "/Men/".
        A path prefix of the channel domain (e.g. "/de") is kept on SEO
        paths.

        Args:
            category: Category with its SEO URLs.

        Returns:
            Unique paths, navigation paths first.
        """
        categories = [category, *await self.hierarchy.ancestors_of(category)]

        non_seo_urls = [self._build_non_seo_category_url(c) for c in categories]
        seo_urls = [url for c in categories for url in self._build_seo_category_urls(c)]

        return unique(non_seo_urls + seo_urls)

    def _build_non_seo_category_url(self, category: Category) -> str:
        path = self.router.generate_absolute_path(
            NAVIGATION_ROUTE,
            {"navigationId": category.id},
        )
        return "/" + path.lstrip("/")

    def _build_seo_category_urls(self, category: Category) -> list[str]:
        prefix = self._category_url_prefix()
        urls = []
        for seo_url in self._applicable_seo_urls(category.seo_urls):
            path = seo_url.seo_path_info.strip()
            if not path:
                continue
            urls.append(f"{prefix}/{path.lstrip('/')}")
        return urls

    def _category_url_prefix(self) -> str:
        """Get the path component of the channel domain (e.g. "/de")."""
        domain = self.get_sales_channel_domain()
        if not domain:
            return ""
        return urlparse(domain).path.rstrip("/")

    # ========================================================================
    # SEO URL Filtering
    # ========================================================================

    def _applicable_seo_urls(self, seo_urls: tuple[SeoUrl, ...]) -> list[SeoUrl]:
        """Keep SEO URLs of the active language and channel that are not deleted."""
        return [
            seo_url
            for seo_url in seo_urls
            if seo_url.language_id == self.context.language_id
            and seo_url.sales_channel_id == self.context.sales_channel_id
            and not seo_url.is_deleted
        ]
