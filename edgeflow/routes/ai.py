"""One-shot AI processing routes."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from ..core.dependencies import get_ai_service
from ..core.exceptions import AICompletionError, UnsupportedActionError
from ..schemas.edge import AIBatchRequest, AIProcessRequest
from ..services.ai_service import AIService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai")

AIServiceDep = Annotated[AIService, Depends(get_ai_service)]


@router.post("/process")
async def process(request: AIProcessRequest, service: AIServiceDep) -> dict[str, Any]:
    """Run analyze, generate, classify, summarize or extract on the given data."""
    try:
        return await service.process(request.action, request.data, request.config)
    except (UnsupportedActionError, AICompletionError) as e:
        logger.warning("AI %s request failed: %s", request.action, e.message)
        return {"success": False, "error": e.message}


@router.post("/batch")
async def batch(request: AIBatchRequest, service: AIServiceDep) -> dict[str, Any]:
    """Classify or summarize each item; per-item failures are reported inline."""
    try:
        return await service.batch(request.action, request.items, request.config)
    except UnsupportedActionError as e:
        return {"success": False, "error": e.message}
