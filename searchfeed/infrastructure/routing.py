"""Storefront route generation.

Builds the storefront's non-SEO links (product detail and category
navigation pages) for a sales channel base URL.
"""

from urllib.parse import quote

PRODUCT_DETAIL_ROUTE = "frontend.detail.page"
NAVIGATION_ROUTE = "frontend.navigation.page"

_ROUTES: dict[str, str] = {
    PRODUCT_DETAIL_ROUTE: "/detail/{productId}",
    NAVIGATION_ROUTE: "/navigation/{navigationId}",
}


class Router:
    """Generates storefront URLs by route name.

    Example usage:
        router = Router("https://shop.example.com")
        router.generate_absolute_url("frontend.detail.page", {"productId": "abc"})
        # "https://shop.example.com/detail/abc"
    """

    def __init__(self, base_url: str) -> None:
        """Initialize router.

        Args:
            base_url: Scheme and host of the storefront, optionally with a path.
        """
        self.base_url = base_url.rstrip("/")

    def generate_absolute_path(self, route_name: str, params: dict[str, str]) -> str:
        """Generate the path of a route.

        Args:
            route_name: Route name.
            params: Route parameters.

        Returns:
            Path starting with a slash.

        Raises:
            ValueError: If the route is unknown or a parameter is missing.
        """
        template = _ROUTES.get(route_name)
        if template is None:
            raise ValueError(f"Unknown route: {route_name}")
        try:
            return template.format(**{k: quote(str(v), safe="") for k, v in params.items()})
        except KeyError as e:
            raise ValueError(f"Missing parameter {e} for route {route_name}") from e

    def generate_absolute_url(self, route_name: str, params: dict[str, str]) -> str:
        """Generate the absolute URL of a route.

        Args:
            route_name: Route name.
            params: Route parameters.

        Returns:
            Absolute URL.
        """
        return self.base_url + self.generate_absolute_path(route_name, params)
