"""API layer module.

Contains FastAPI routers, middleware and response schemas.
"""

from searchfeed.api.export import router as export_router
from searchfeed.api.health import router as health_router

__all__ = [
    "export_router",
    "health_router",
]
