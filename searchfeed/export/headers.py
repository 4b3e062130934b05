"""Response headers of the export endpoint."""

from searchfeed.infrastructure.config import settings

CONTENT_TYPE_HEADER = "Content-Type"
PLATFORM_HEADER = "X-Search-Platform"
PLUGIN_HEADER = "X-Search-Plugin"

XML_CONTENT_TYPE = "text/xml; charset=utf-8"
JSON_CONTENT_TYPE = "application/json"


class HeaderHandler:
    """Builds the headers sent with every export response.

    Example usage:
        handler = HeaderHandler()
        handler.get_headers({CONTENT_TYPE_HEADER: JSON_CONTENT_TYPE})
    """

    def __init__(
        self,
        platform_name: str | None = None,
        plugin_version: str | None = None,
    ) -> None:
        """Initialize header handler.

        Args:
            platform_name: Storefront platform, defaults to settings.
            plugin_version: Version of this service, defaults to settings.
        """
        self.platform_name = platform_name or settings.platform_name
        self.plugin_version = plugin_version or settings.api_version

    def get_headers(self, overrides: dict[str, str] | None = None) -> dict[str, str]:
        """Get the response headers.

        Args:
            overrides: Headers replacing the defaults.

        Returns:
            Header mapping, XML content type unless overridden.
        """
        headers = {
            CONTENT_TYPE_HEADER: XML_CONTENT_TYPE,
            PLATFORM_HEADER: self.platform_name,
            PLUGIN_HEADER: f"SearchFeed/{self.plugin_version}",
        }
        headers.update(overrides or {})
        return headers
