"""HTTP client for the external search service.

Sends search and navigation requests on behalf of a shop and returns
the product ids the service ranked, in response order.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx
import structlog

from searchfeed.domain.exceptions import SearchServiceError, SearchServiceUnavailableError
from searchfeed.infrastructure.config import settings

logger = structlog.get_logger()

ALIVE_TEST_ENDPOINT = "alivetest.php"
OUTPUT_ADAPTER = "JSON_1.0"


class RequestType(str, Enum):
    """Kind of request sent to the search service."""

    SEARCH = "search"
    NAVIGATION = "navigation"

    @property
    def endpoint(self) -> str:
        """Get the service endpoint for this request type."""
        return "index.php" if self == RequestType.SEARCH else "selector.php"


@dataclass(frozen=True)
class SearchServiceRequest:
    """A search or navigation request.

    Attributes:
        request_type: Search or navigation.
        query: Search phrase, for search requests.
        category: Selected category path, for navigation requests.
        shop_url: Host of the storefront the request originates from.
        user_ip: Client IP of the shopper.
        referer: Referring page.
        usergroup: User group hash of the shopper.
        first: Offset of the first result.
        count: Maximum number of results.
    """

    request_type: RequestType
    query: str | None = None
    category: str | None = None
    shop_url: str | None = None
    user_ip: str | None = None
    referer: str | None = None
    usergroup: str | None = None
    first: int = 0
    count: int | None = None

    def to_params(self, shopkey: str) -> dict[str, Any]:
        """Build the query parameters of the request.

        Args:
            shopkey: Shop the request is sent for.

        Returns:
            Query parameters without None values.
        """
        params: dict[str, Any] = {
            "shopkey": shopkey,
            "outputAdapter": OUTPUT_ADAPTER,
            "first": self.first,
        }
        if self.request_type == RequestType.SEARCH:
            params["query"] = self.query or ""
        if self.category:
            params["selected[cat][]"] = self.category
        optional = {
            "shopurl": self.shop_url,
            "userip": self.user_ip,
            "referer": self.referer,
            "usergrouphash": self.usergroup,
            "count": self.count,
        }
        params.update({key: value for key, value in optional.items() if value is not None})
        return params


@dataclass
class SearchServiceResponse:
    """Products returned by the search service."""

    product_ids: list[str] = field(default_factory=list)
    total_results: int = 0

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "SearchServiceResponse":
        """Create from API response data.

        Raises:
            SearchServiceError: If the payload has no result section.
        """
        result = data.get("result") if isinstance(data, dict) else None
        if not isinstance(result, dict):
            raise SearchServiceError("Search service response has no result")

        items = result.get("items", [])
        metadata = result.get("metadata", {})
        return cls(
            product_ids=[str(item["id"]) for item in items if "id" in item],
            total_results=metadata.get("totalResults", len(items)),
        )


class SearchServiceClient:
    """HTTP client for the external search service.

    Every request is preceded by an alive check; a service that is not
    alive is treated like an unreachable one.

    Example usage:
        client = SearchServiceClient()
        response = await client.send(request, shopkey="ABCD0123")
        ids = response.product_ids
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize search service client.

        Args:
            base_url: Service URL, defaults to settings.
            timeout: Request timeout in seconds, defaults to settings.
            transport: Optional transport, used to stub the service.
        """
        self.base_url = (base_url or settings.search_service_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.search_timeout
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url + "/",
                timeout=self.timeout,
                transport=self.transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def is_alive(self, shopkey: str) -> bool:
        """Check whether the service answers for a shop.

        Args:
            shopkey: Shop to check.

        Returns:
            True if the service reported itself alive.
        """
        try:
            client = await self._get_client()
            response = await client.get(ALIVE_TEST_ENDPOINT, params={"shopkey": shopkey})
        except httpx.HTTPError as e:
            logger.warning("Search service alive check failed", shopkey=shopkey, error=str(e))
            return False

        return response.status_code == 200 and response.text.strip() == "alive"

    async def send(self, request: SearchServiceRequest, shopkey: str) -> SearchServiceResponse:
        """Send a request to the search service.

        Args:
            request: Search or navigation request.
            shopkey: Shop the request is sent for.

        Returns:
            Ranked product ids.

        Raises:
            SearchServiceUnavailableError: If the service is not alive or unreachable.
            SearchServiceError: On an error response.
        """
        if not await self.is_alive(shopkey):
            raise SearchServiceUnavailableError("Search service is not alive")

        try:
            client = await self._get_client()
            response = await client.get(
                request.request_type.endpoint,
                params=request.to_params(shopkey),
            )
        except httpx.HTTPError as e:
            logger.error(
                "Search service request failed",
                shopkey=shopkey,
                request_type=request.request_type.value,
                error=str(e),
            )
            raise SearchServiceUnavailableError(f"Request failed: {str(e)}") from e

        if response.status_code != 200:
            raise SearchServiceError(
                f"Search service returned an error: {response.text}",
                response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise SearchServiceError("Search service returned invalid JSON") from e

        return SearchServiceResponse.from_api_response(data)


# Global client instance
_search_client: SearchServiceClient | None = None


def get_search_client() -> SearchServiceClient:
    """Get the search service client singleton.

    Returns:
        SearchServiceClient instance.
    """
    global _search_client
    if _search_client is None:
        _search_client = SearchServiceClient()
    return _search_client
