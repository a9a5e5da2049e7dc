"""HTTP Request node - makes HTTP requests to external APIs."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

import httpx

from ..base import (
    BaseNode,
    NodeTypeDescription,
    NodeProperty,
    NodePropertyOption,
)
from ...core.exceptions import ExecutorError
from ...engine.types import NodeType

if TYPE_CHECKING:
    from ...engine.types import ContextView, NodeDefinition, NodeResult

DEFAULT_HEADERS = {"Content-Type": "application/json"}


class HttpRequestNode(BaseNode):
    """HTTP Request node - makes HTTP requests to external APIs."""

    node_description = NodeTypeDescription(
        name=NodeType.HTTP_REQUEST.value,
        display_name="HTTP Request",
        description="Makes HTTP requests to external APIs",
        icon="fa:globe",
        group=["output"],
        properties=[
            NodeProperty(
                display_name="Method",
                name="method",
                type="options",
                default="GET",
                options=[
                    NodePropertyOption(name="GET", value="GET"),
                    NodePropertyOption(name="POST", value="POST"),
                    NodePropertyOption(name="PUT", value="PUT"),
                    NodePropertyOption(name="PATCH", value="PATCH"),
                    NodePropertyOption(name="DELETE", value="DELETE"),
                ],
            ),
            NodeProperty(
                display_name="URL",
                name="url",
                type="string",
                required=True,
                placeholder="https://api.example.com/endpoint",
                interpolated=True,
            ),
            NodeProperty(
                display_name="Headers",
                name="headers",
                type="json",
                default={},
                description="Extra headers, merged over Content-Type: application/json",
                interpolated=True,
            ),
            NodeProperty(
                display_name="Body",
                name="body",
                type="json",
                description="Request body. Ignored for GET.",
                interpolated=True,
            ),
        ],
    )

    @property
    def type(self) -> str:
        return NodeType.HTTP_REQUEST.value

    @property
    def description(self) -> str:
        return "Makes HTTP requests to external APIs"

    async def execute(self, node: NodeDefinition, context: ContextView) -> NodeResult:
        url = self.interpolate(str(self.get_parameter(node, "url")), context)
        method = str(self.get_parameter(node, "method", "GET")).upper()

        headers: dict[str, str] = dict(DEFAULT_HEADERS)
        extra_headers = self.get_parameter(node, "headers", {})
        if isinstance(extra_headers, dict):
            headers.update(
                {str(k): str(v) for k, v in self.interpolate(extra_headers, context).items()}
            )

        body = node.config.get("body")
        request_kwargs: dict[str, Any] = {}
        if method != "GET" and body not in (None, ""):
            body = self.interpolate(body, context)
            if isinstance(body, (dict, list)):
                request_kwargs["json"] = body
            else:
                request_kwargs["content"] = str(body)

        try:
            client = context.services.http_client
            if client is not None:
                response = await client.request(method, url, headers=headers, **request_kwargs)
            else:
                async with httpx.AsyncClient(timeout=None) as temp_client:
                    response = await temp_client.request(
                        method, url, headers=headers, **request_kwargs
                    )
        except httpx.HTTPError as e:
            raise ExecutorError(f"HTTP request to {url} failed: {e}", node_id=node.id) from e

        return self.output({
            "status": response.status_code,
            "headers": dict(response.headers),
            "data": self._read_body(response, node),
        })

    def _read_body(self, response: httpx.Response, node: NodeDefinition) -> Any:
        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            try:
                return response.json()
            except ValueError as e:
                raise ExecutorError(
                    f"HTTP response is not valid JSON: {e}", node_id=node.id
                ) from e
        return response.text
