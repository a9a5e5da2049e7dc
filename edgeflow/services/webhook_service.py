"""Webhook service - turns an inbound HTTP request into a workflow run."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Mapping
from urllib.parse import parse_qsl

from ..core.exceptions import WebhookAuthError, WebhookError
from ..engine.types import META_KEY, utc_now
from .geo import geo_from_headers

if TYPE_CHECKING:
    from fastapi.datastructures import FormData

    from ..engine.types import RunRecord
    from ..storage.workflow_store import WebhookRegistration, WorkflowStore
    from .execution_service import ExecutionService

logger = logging.getLogger(__name__)

BODY_METHODS = ("POST", "PUT", "PATCH")


def parse_webhook_body(method: str, content_type: str, raw: bytes) -> dict[str, Any]:
    """Parse a request body into trigger data by content type.

    JSON objects are used as-is; other JSON values, unparsable JSON and
    unknown content types become ``{"body": text}``. Urlencoded forms become
    a flat mapping. Multipart forms are read by the route and passed to
    ``WebhookService.handle_webhook`` through ``form_to_body``. Bodies of
    other methods are ignored.
    """
    if method.upper() not in BODY_METHODS:
        return {}

    text = raw.decode("utf-8", errors="replace")
    content_type = content_type.lower()

    if "application/json" in content_type:
        try:
            parsed = json.loads(text)
        except ValueError:
            return {"body": text}
        return parsed if isinstance(parsed, dict) else {"body": parsed}

    if "application/x-www-form-urlencoded" in content_type:
        return dict(parse_qsl(text, keep_blank_values=True))

    return {"body": text}


def form_to_body(form: FormData) -> dict[str, Any]:
    """Flatten multipart form data into trigger data; the last value of a repeated field wins.

    Uploaded files are described by name, content type and size.
    """
    body: dict[str, Any] = {}
    for key, value in form.multi_items():
        if isinstance(value, str):
            body[key] = value
        else:
            body[key] = {
                "filename": value.filename,
                "contentType": value.content_type,
                "size": value.size,
            }
    return body


def validate_webhook_auth(registration: WebhookRegistration, headers: Mapping[str, str]) -> bool:
    """Check the bearer token of a request against the webhook's API key."""
    if not registration.auth:
        return True

    lowered = {k.lower(): v for k, v in headers.items()}
    auth_header = lowered.get("authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return False

    token = auth_header[len("Bearer "):]
    return registration.api_key is not None and token == registration.api_key


class WebhookService:
    """Service for webhook operations."""

    def __init__(self, workflow_store: WorkflowStore, execution_service: ExecutionService) -> None:
        self._workflow_store = workflow_store
        self._execution_service = execution_service

    def build_trigger_data(
        self,
        webhook_id: str,
        method: str,
        path: str,
        query: Mapping[str, str],
        headers: Mapping[str, str],
        body: dict[str, Any],
    ) -> dict[str, Any]:
        """Attach request metadata under ``_meta`` to the parsed body."""
        trigger_data = dict(body)
        trigger_data[META_KEY] = {
            "webhookId": webhook_id,
            "method": method.upper(),
            "path": path,
            "query": dict(query),
            "headers": dict(headers),
            "timestamp": utc_now().isoformat(),
            "geo": geo_from_headers(headers),
        }
        return trigger_data

    async def handle_webhook(
        self,
        webhook_id: str,
        method: str,
        path: str,
        query: Mapping[str, str],
        headers: Mapping[str, str],
        content_type: str,
        raw_body: bytes,
        form_fields: Mapping[str, Any] | None = None,
    ) -> RunRecord:
        """Handle an incoming webhook request.

        Raises:
            WebhookError: If no workflow is bound to the webhook id.
            WebhookAuthError: If the webhook requires a token that does not match.
        """
        registration = self._workflow_store.get_webhook(webhook_id)
        workflow = self._workflow_store.get_by_webhook(webhook_id)
        if registration is None or workflow is None:
            raise WebhookError(f"No workflow found for webhook ID: {webhook_id}", webhook_id)

        if not validate_webhook_auth(registration, headers):
            logger.warning("Rejected unauthorized call to webhook %s", webhook_id)
            raise WebhookAuthError(webhook_id)

        if form_fields is not None and method.upper() in BODY_METHODS:
            body = dict(form_fields)
        else:
            body = parse_webhook_body(method, content_type, raw_body)
        trigger_data = self.build_trigger_data(webhook_id, method, path, query, headers, body)

        return await self._execution_service.execute(workflow, trigger_data)
