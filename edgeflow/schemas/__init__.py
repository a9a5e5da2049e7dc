"""Pydantic schemas for API request/response validation."""

from .workflow import (
    NodeDefinitionSchema,
    ConnectionSchema,
    WorkflowSchema,
    WorkflowExecuteRequest,
    WebhookRegisterRequest,
)
from .execution import (
    ExecutionListItem,
    ExecutionListResponse,
)
from .node import NodeTypeSchema, NodeGroupSchema
from .edge import KVPutRequest, KVBatchRequest, AIProcessRequest, AIBatchRequest
from .common import (
    HealthResponse,
    RootResponse,
)

__all__ = [
    # Workflow
    "NodeDefinitionSchema",
    "ConnectionSchema",
    "WorkflowSchema",
    "WorkflowExecuteRequest",
    "WebhookRegisterRequest",
    # Execution
    "ExecutionListItem",
    "ExecutionListResponse",
    # Node
    "NodeTypeSchema",
    "NodeGroupSchema",
    # Edge
    "KVPutRequest",
    "KVBatchRequest",
    "AIProcessRequest",
    "AIBatchRequest",
    # Common
    "HealthResponse",
    "RootResponse",
]
