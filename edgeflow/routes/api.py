"""API router aggregating the /api routes."""

from __future__ import annotations

from fastapi import APIRouter, Request

from ..core.config import settings
from ..engine.types import utc_now
from ..schemas.common import HealthResponse
from ..services.geo import geo_from_headers
from .ai import router as ai_router
from .executions import router as executions_router
from .kv import router as kv_router
from .nodes import router as nodes_router
from .webhooks import router as webhooks_router
from .workflows import router as workflows_router

router = APIRouter(prefix="/api")

router.include_router(workflows_router, tags=["Workflows"])
router.include_router(webhooks_router, tags=["Webhooks"])
router.include_router(executions_router, tags=["Executions"])
router.include_router(nodes_router, tags=["Nodes"])
router.include_router(kv_router, tags=["KV"])
router.include_router(ai_router, tags=["AI"])


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health(request: Request) -> HealthResponse:
    """Health check with the edge location of the caller."""
    geo = geo_from_headers(request.headers)
    return HealthResponse(
        version=settings.app_version,
        timestamp=utc_now().isoformat(),
        edge={
            "location": str(geo.get("colo", "unknown")),
            "country": str(geo.get("country", "unknown")),
        },
    )
