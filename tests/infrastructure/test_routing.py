"""Unit tests for storefront route generation."""

import pytest

from searchfeed.infrastructure.routing import NAVIGATION_ROUTE, PRODUCT_DETAIL_ROUTE, Router


class TestRouter:
    """Tests for Router."""

    def test_product_detail_url(self) -> None:
        router = Router("https://shop.example.com/")

        assert router.generate_absolute_url(PRODUCT_DETAIL_ROUTE, {"productId": "p1"}) == (
            "https://shop.example.com/detail/p1"
        )

    def test_navigation_path(self) -> None:
        router = Router("https://shop.example.com")

        assert router.generate_absolute_path(NAVIGATION_ROUTE, {"navigationId": "c1"}) == (
            "/navigation/c1"
        )

    def test_base_url_with_path(self) -> None:
        router = Router("https://shop.example.com/de")

        assert router.generate_absolute_url(PRODUCT_DETAIL_ROUTE, {"productId": "p1"}) == (
            "https://shop.example.com/de/detail/p1"
        )

    def test_params_are_quoted(self) -> None:
        router = Router("https://shop.example.com")

        assert router.generate_absolute_path(PRODUCT_DETAIL_ROUTE, {"productId": "a/b c"}) == (
            "/detail/a%2Fb%20c"
        )

    def test_unknown_route(self) -> None:
        with pytest.raises(ValueError, match="Unknown route"):
            Router("https://shop.example.com").generate_absolute_path("frontend.cart", {})

    def test_missing_param(self) -> None:
        with pytest.raises(ValueError, match="Missing parameter"):
            Router("https://shop.example.com").generate_absolute_path(PRODUCT_DETAIL_ROUTE, {})
