"""Tests for the external search service client."""

import httpx
import pytest

from searchfeed.domain.exceptions import SearchServiceError, SearchServiceUnavailableError
from searchfeed.infrastructure.search_client import (
    RequestType,
    SearchServiceClient,
    SearchServiceRequest,
    SearchServiceResponse,
)

BASE_URL = "https://service.example.com/ps"
SHOPKEY = "ABCDABCDABCDABCDABCDABCDABCDABCD"

RESULT = {
    "result": {
        "items": [{"id": "p2"}, {"id": "p1"}],
        "metadata": {"totalResults": 2},
    }
}


def make_client(handler) -> SearchServiceClient:
    return SearchServiceClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))


def service(alive: bool = True, status_code: int = 200, payload=RESULT, requests=None):
    """Build a handler answering the alive check and the search endpoints."""

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        if request.url.path.endswith("alivetest.php"):
            return httpx.Response(200, text="alive" if alive else "dead")
        if isinstance(payload, str):
            return httpx.Response(status_code, text=payload)
        return httpx.Response(status_code, json=payload)

    return handler


class TestSearchServiceRequest:
    def test_search_params(self) -> None:
        request = SearchServiceRequest(
            request_type=RequestType.SEARCH,
            query="shirt",
            shop_url="shop.example.com",
            user_ip="127.0.0.1",
        )

        params = request.to_params(SHOPKEY)

        assert params == {
            "shopkey": SHOPKEY,
            "outputAdapter": "JSON_1.0",
            "first": 0,
            "query": "shirt",
            "shopurl": "shop.example.com",
            "userip": "127.0.0.1",
        }

    def test_navigation_params(self) -> None:
        request = SearchServiceRequest(request_type=RequestType.NAVIGATION, category="Men_Shirts")

        params = request.to_params(SHOPKEY)

        assert params["selected[cat][]"] == "Men_Shirts"
        assert "query" not in params

    def test_endpoints(self) -> None:
        assert RequestType.SEARCH.endpoint == "index.php"
        assert RequestType.NAVIGATION.endpoint == "selector.php"


class TestSearchServiceResponse:
    def test_from_api_response(self) -> None:
        response = SearchServiceResponse.from_api_response(RESULT)

        assert response.product_ids == ["p2", "p1"]
        assert response.total_results == 2

    def test_missing_result(self) -> None:
        with pytest.raises(SearchServiceError):
            SearchServiceResponse.from_api_response({"error": "nope"})


class TestSearchServiceClient:
    """Tests for SearchServiceClient."""

    @pytest.mark.asyncio
    async def test_send_search(self) -> None:
        requests: list[httpx.Request] = []
        client = make_client(service(requests=requests))

        response = await client.send(
            SearchServiceRequest(request_type=RequestType.SEARCH, query="shirt"),
            SHOPKEY,
        )
        await client.close()

        assert response.product_ids == ["p2", "p1"]
        assert [r.url.path for r in requests] == ["/ps/alivetest.php", "/ps/index.php"]
        assert requests[1].url.params["query"] == "shirt"
        assert requests[1].url.params["shopkey"] == SHOPKEY

    @pytest.mark.asyncio
    async def test_send_navigation(self) -> None:
        requests: list[httpx.Request] = []
        client = make_client(service(requests=requests))

        await client.send(
            SearchServiceRequest(request_type=RequestType.NAVIGATION, category="Men"),
            SHOPKEY,
        )

        assert requests[-1].url.path == "/ps/selector.php"

    @pytest.mark.asyncio
    async def test_not_alive(self) -> None:
        client = make_client(service(alive=False))

        with pytest.raises(SearchServiceUnavailableError):
            await client.send(SearchServiceRequest(request_type=RequestType.SEARCH), SHOPKEY)

    @pytest.mark.asyncio
    async def test_unreachable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        assert await client.is_alive(SHOPKEY) is False
        with pytest.raises(SearchServiceUnavailableError):
            await client.send(SearchServiceRequest(request_type=RequestType.SEARCH), SHOPKEY)

    @pytest.mark.asyncio
    async def test_error_status(self) -> None:
        client = make_client(service(status_code=500, payload="boom"))

        with pytest.raises(SearchServiceError) as exc_info:
            await client.send(SearchServiceRequest(request_type=RequestType.SEARCH), SHOPKEY)

        assert exc_info.value.status_code == 500
        assert not isinstance(exc_info.value, SearchServiceUnavailableError)

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        client = make_client(service(payload="<html></html>"))

        with pytest.raises(SearchServiceError, match="invalid JSON"):
            await client.send(SearchServiceRequest(request_type=RequestType.SEARCH), SHOPKEY)
