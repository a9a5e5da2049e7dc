"""Webhook routes for triggering workflows."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request

from ..core.dependencies import get_webhook_service
from ..core.exceptions import InvalidWorkflowError, WebhookError
from ..services.webhook_service import BODY_METHODS, WebhookService, form_to_body

router = APIRouter()

WebhookServiceDep = Annotated[WebhookService, Depends(get_webhook_service)]


@router.api_route(
    "/webhook/{webhook_id}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
)
async def handle_webhook(
    webhook_id: str,
    request: Request,
    service: WebhookServiceDep,
) -> dict[str, Any]:
    """Handle incoming webhook to trigger a workflow."""
    content_type = request.headers.get("content-type", "")
    form_fields = None
    raw_body = b""

    if request.method in BODY_METHODS and "multipart/form-data" in content_type.lower():
        form = await request.form()
        try:
            form_fields = form_to_body(form)
        finally:
            await form.close()
    else:
        raw_body = await request.body()

    try:
        record = await service.handle_webhook(
            webhook_id,
            method=request.method,
            path=request.url.path,
            query=dict(request.query_params),
            headers=dict(request.headers),
            content_type=content_type,
            raw_body=raw_body,
            form_fields=form_fields,
        )
    except (WebhookError, InvalidWorkflowError) as e:
        return {"success": False, "error": e.message}

    return record.to_dict()
