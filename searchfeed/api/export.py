"""Export API endpoint.

Serves the paginated XML product feed consumed by the search service.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from searchfeed.api.schemas import ErrorResponse, ExportErrorsResponse
from searchfeed.domain.value_objects import DEFAULT_COUNT, DEFAULT_START, ExportRequest
from searchfeed.export.headers import CONTENT_TYPE_HEADER, JSON_CONTENT_TYPE, HeaderHandler
from searchfeed.export.service import ExportService
from searchfeed.export.xml_exporter import XmlExporter
from searchfeed.infrastructure.database import get_session

router = APIRouter(tags=["Export"])

CONTEXT_TOKEN_HEADER = "X-Context-Token"


# ============================================================================
# Dependencies
# ============================================================================


def get_export_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ExportService:
    """Get export service bound to the request session."""
    return ExportService(session)


def get_header_handler() -> HeaderHandler:
    """Get response header handler."""
    return HeaderHandler()


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "/export",
    response_class=Response,
    responses={
        200: {"content": {"text/xml": {}}, "description": "XML product feed"},
        400: {"model": ErrorResponse, "description": "Invalid export parameters"},
        401: {"model": ErrorResponse, "description": "Unknown shopkey"},
        422: {"model": ExportErrorsResponse, "description": "Requested product not exported"},
    },
)
async def export_feed(
    request: Request,
    service: Annotated[ExportService, Depends(get_export_service)],
    header_handler: Annotated[HeaderHandler, Depends(get_header_handler)],
    shopkey: Annotated[str, Query(description="Shopkey of the shop")] = "",
    start: Annotated[int, Query(description="Offset of the first product")] = DEFAULT_START,
    count: Annotated[int, Query(description="Maximum number of products")] = DEFAULT_COUNT,
    product_id: Annotated[
        str | None,
        Query(alias="productId", description="UUID, EAN, manufacturer number or SKU"),
    ] = None,
) -> Response:
    """Export a page of the catalog.

    Returns the XML feed, or a JSON list of errors if a single product
    was requested and could not be exported.
    """
    export_request = ExportRequest(
        shopkey=shopkey,
        start=start,
        count=count,
        product_id=product_id,
    )

    result = await service.export(
        export_request,
        base_url=str(request.base_url),
        token=request.headers.get(CONTEXT_TOKEN_HEADER),
    )

    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=ExportErrorsResponse(errors=result.error_messages).model_dump(),
            headers=header_handler.get_headers({CONTENT_TYPE_HEADER: JSON_CONTENT_TYPE}),
        )

    feed = result.feed
    body = XmlExporter().serialize_items(
        list(feed.items),
        feed.start,
        feed.page_count,
        feed.total_count,
    )
    return Response(
        content=body,
        status_code=status.HTTP_200_OK,
        headers=header_handler.get_headers(),
    )
