"""In-memory workflow and webhook registration storage."""

from __future__ import annotations

import copy
import secrets
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..engine.types import Connection, NodeDefinition, Workflow, utc_now


@dataclass
class WebhookRegistration:
    """Binding of a webhook id to a stored workflow."""

    id: str
    workflow_id: str
    path: str
    method: str = "POST"
    auth: bool = False
    api_key: str | None = None
    created_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "workflowId": self.workflow_id,
            "path": self.path,
            "method": self.method,
            "auth": self.auth,
            "createdAt": self.created_at.isoformat(),
        }


def workflow_from_dict(data: dict[str, Any]) -> Workflow:
    """Build a workflow from its camelCase wire shape.

    Template connections may reference nodes by list index instead of id.
    """
    nodes = []
    for index, raw in enumerate(data.get("nodes") or []):
        nodes.append(
            NodeDefinition(
                id=str(raw.get("id") or f"node-{index + 1}"),
                node_type=str(raw.get("nodeType", "")),
                name=raw.get("name", ""),
                config=dict(raw.get("config") or {}),
                position=raw.get("position"),
            )
        )

    def resolve(ref: Any) -> str:
        if isinstance(ref, int) and 0 <= ref < len(nodes):
            return nodes[ref].id
        return str(ref)

    connections = [
        Connection(source=resolve(c.get("from")), target=resolve(c.get("to")))
        for c in data.get("connections") or []
    ]
    return Workflow(
        name=data.get("name", ""),
        nodes=nodes,
        connections=connections,
        id=data.get("id"),
    )


DEMO_WORKFLOW: dict[str, Any] = {
    "id": "wf-demo",
    "name": "Demo workflow",
    "nodes": [
        {
            "id": "node-1",
            "nodeType": "WEBHOOK",
            "name": "Receive request",
            "position": {"x": 100, "y": 100},
            "config": {"path": "/demo", "method": "POST"},
        },
        {
            "id": "node-2",
            "nodeType": "TRANSFORM",
            "name": "Transform data",
            "position": {"x": 400, "y": 100},
            "config": {"expression": '{**data, "processed": true}', "outputKey": "result"},
        },
        {
            "id": "node-3",
            "nodeType": "RESPONSE",
            "name": "Return result",
            "position": {"x": 700, "y": 100},
            "config": {"statusCode": 200, "contentType": "application/json"},
        },
    ],
    "connections": [
        {"from": "node-1", "to": "node-2"},
        {"from": "node-2", "to": "node-3"},
    ],
}

WORKFLOW_TEMPLATES: list[dict[str, Any]] = [
    {
        "id": "geo-redirect",
        "name": "Geo redirect",
        "description": "Redirect visitors to a regional site based on their location",
        "category": "edge",
        "nodes": [
            {"nodeType": "GEO_TRIGGER", "name": "Geo trigger", "position": {"x": 100, "y": 100},
             "config": {"countries": "CN", "action": "include"}},
            {"nodeType": "EDGE_REDIRECT", "name": "Redirect", "position": {"x": 400, "y": 100},
             "config": {"url": "https://cn.example.com", "statusCode": "302"}},
        ],
        "connections": [{"from": 0, "to": 1}],
    },
    {
        "id": "ai-content-filter",
        "name": "AI content filter",
        "description": "Classify submitted content with AI and drop violations",
        "category": "ai",
        "nodes": [
            {"nodeType": "WEBHOOK", "name": "Receive content", "position": {"x": 100, "y": 100},
             "config": {"path": "/content", "method": "POST"}},
            {"nodeType": "AI_CLASSIFY", "name": "Classify", "position": {"x": 400, "y": 100},
             "config": {"categories": "normal,spam,violation", "field": "content"}},
            {"nodeType": "FILTER", "name": "Drop violations", "position": {"x": 700, "y": 100},
             "config": {"condition": 'classification !== "violation"'}},
            {"nodeType": "RESPONSE", "name": "Return result", "position": {"x": 1000, "y": 100},
             "config": {"statusCode": 200, "contentType": "application/json"}},
        ],
        "connections": [{"from": 0, "to": 1}, {"from": 1, "to": 2}, {"from": 2, "to": 3}],
    },
    {
        "id": "smart-cache",
        "name": "Smart edge cache",
        "description": "Cache upstream responses at the edge",
        "category": "edge",
        "nodes": [
            {"nodeType": "WEBHOOK", "name": "Receive request", "position": {"x": 100, "y": 100},
             "config": {"path": "/data", "method": "GET"}},
            {"nodeType": "EDGE_CACHE", "name": "Check cache", "position": {"x": 400, "y": 100},
             "config": {"action": "get", "key": "cache:${url}"}},
            {"nodeType": "HTTP_REQUEST", "name": "Fetch data", "position": {"x": 700, "y": 200},
             "config": {"url": "https://api.example.com/data", "method": "GET"}},
            {"nodeType": "EDGE_CACHE", "name": "Write cache", "position": {"x": 1000, "y": 200},
             "config": {"action": "set", "key": "cache:${url}", "ttl": 3600}},
            {"nodeType": "RESPONSE", "name": "Return data", "position": {"x": 1000, "y": 100},
             "config": {"statusCode": 200, "contentType": "application/json"}},
        ],
        "connections": [
            {"from": 0, "to": 1}, {"from": 1, "to": 2}, {"from": 2, "to": 3},
            {"from": 3, "to": 4}, {"from": 1, "to": 4},
        ],
    },
    {
        "id": "scheduled-report",
        "name": "Scheduled report",
        "description": "Collect data on a timer and have AI write a report",
        "category": "ai",
        "nodes": [
            {"nodeType": "SCHEDULE", "name": "Daily trigger", "position": {"x": 100, "y": 100},
             "config": {"cron": "0 9 * * *", "timezone": "Asia/Shanghai"}},
            {"nodeType": "HTTP_REQUEST", "name": "Fetch data", "position": {"x": 400, "y": 100},
             "config": {"url": "https://api.example.com/stats", "method": "GET"}},
            {"nodeType": "AI_GENERATE", "name": "Write report", "position": {"x": 700, "y": 100},
             "config": {"prompt": "Write a daily report from the following data", "format": "markdown"}},
            {"nodeType": "EMAIL", "name": "Send email", "position": {"x": 1000, "y": 100},
             "config": {"to": "team@example.com", "subject": "Daily report", "template": "${generated}",
                        "format": "markdown"}},
        ],
        "connections": [{"from": 0, "to": 1}, {"from": 1, "to": 2}, {"from": 2, "to": 3}],
    },
]


class WorkflowStore:
    """In-memory workflow storage with webhook bindings."""

    def __init__(self, seed_demo: bool = True) -> None:
        self._workflows: dict[str, Workflow] = {}
        self._webhooks: dict[str, WebhookRegistration] = {}
        if seed_demo:
            demo = self.save(workflow_from_dict(DEMO_WORKFLOW))
            self._webhooks["demo-webhook"] = WebhookRegistration(
                id="demo-webhook", workflow_id=demo.id or "", path="/demo", method="POST"
            )

    def save(self, workflow: Workflow) -> Workflow:
        """Create or replace a workflow, assigning an ID when missing."""
        if not workflow.id:
            workflow = Workflow(
                name=workflow.name,
                nodes=workflow.nodes,
                connections=workflow.connections,
                id=self._generate_id(),
            )
        self._workflows[workflow.id] = workflow
        return workflow

    def get(self, workflow_id: str) -> Workflow | None:
        """Get a workflow by ID."""
        return self._workflows.get(workflow_id)

    def list(self) -> list[Workflow]:
        """List all workflows."""
        return list(self._workflows.values())

    def delete(self, workflow_id: str) -> bool:
        """Delete a workflow and its webhook bindings."""
        if workflow_id not in self._workflows:
            return False
        del self._workflows[workflow_id]
        for webhook_id in [w.id for w in self._webhooks.values() if w.workflow_id == workflow_id]:
            del self._webhooks[webhook_id]
        return True

    def register_webhook(
        self,
        workflow_id: str,
        path: str | None = None,
        method: str = "POST",
        auth: bool = False,
        api_key: str | None = None,
    ) -> WebhookRegistration:
        """Bind a new webhook id to a workflow."""
        webhook_id = f"wh-{int(time.time() * 1000)}-{secrets.token_hex(5)[:9]}"
        registration = WebhookRegistration(
            id=webhook_id,
            workflow_id=workflow_id,
            path=path or f"/webhook/{webhook_id}",
            method=method.upper(),
            auth=auth,
            api_key=api_key,
        )
        self._webhooks[webhook_id] = registration
        return registration

    def get_webhook(self, webhook_id: str) -> WebhookRegistration | None:
        return self._webhooks.get(webhook_id)

    def get_by_webhook(self, webhook_id: str) -> Workflow | None:
        """Resolve the workflow bound to a webhook id."""
        registration = self._webhooks.get(webhook_id)
        if registration is None:
            return None
        return self._workflows.get(registration.workflow_id)

    def templates(self) -> list[dict[str, Any]]:
        """Starter workflows for the editor."""
        return copy.deepcopy(WORKFLOW_TEMPLATES)

    def clear(self) -> None:
        """Clear all workflows and webhook bindings."""
        self._workflows.clear()
        self._webhooks.clear()

    def _generate_id(self) -> str:
        """Generate a unique workflow ID."""
        return f"wf_{int(time.time() * 1000)}_{uuid.uuid4().hex[:7]}"
