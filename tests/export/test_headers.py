"""Unit tests for export response headers."""

from searchfeed.export.headers import (
    CONTENT_TYPE_HEADER,
    JSON_CONTENT_TYPE,
    PLATFORM_HEADER,
    PLUGIN_HEADER,
    XML_CONTENT_TYPE,
    HeaderHandler,
)
from searchfeed.infrastructure.config import settings


class TestHeaderHandler:
    """Tests for HeaderHandler."""

    def test_default_headers(self) -> None:
        headers = HeaderHandler(platform_name="Storefront", plugin_version="1.2.3").get_headers()

        assert headers == {
            CONTENT_TYPE_HEADER: XML_CONTENT_TYPE,
            PLATFORM_HEADER: "Storefront",
            PLUGIN_HEADER: "SearchFeed/1.2.3",
        }

    def test_override_content_type(self) -> None:
        headers = HeaderHandler().get_headers({CONTENT_TYPE_HEADER: JSON_CONTENT_TYPE})

        assert headers[CONTENT_TYPE_HEADER] == JSON_CONTENT_TYPE
        assert PLATFORM_HEADER in headers

    def test_defaults_from_settings(self) -> None:
        headers = HeaderHandler().get_headers()

        assert headers[PLATFORM_HEADER] == settings.platform_name
        assert headers[PLUGIN_HEADER] == f"SearchFeed/{settings.api_version}"
