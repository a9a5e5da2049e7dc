"""Workflow-related Pydantic schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..engine.types import Workflow
from ..storage.workflow_store import workflow_from_dict


class NodeDefinitionSchema(BaseModel):
    """Schema for node definition in a workflow."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "node-2",
                "nodeType": "TRANSFORM",
                "name": "Transform data",
                "config": {"expression": '{**data, "processed": true}', "outputKey": "result"},
                "position": {"x": 400, "y": 100},
            }
        },
    )

    id: str | None = Field(None, description="Unique node id; defaults to node-<index>")
    node_type: str = Field(..., alias="nodeType", description="Node type tag")
    name: str = Field("", description="Display name")
    config: dict[str, Any] = Field(default_factory=dict, description="Node configuration")
    position: dict[str, float] | None = Field(None, description="UI position {x, y}")


class ConnectionSchema(BaseModel):
    """Schema for connection between nodes."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"from": "node-1", "to": "node-2"}},
    )

    source: str | int = Field(..., alias="from", description="Source node id or index")
    target: str | int = Field(..., alias="to", description="Target node id or index")


class WorkflowSchema(BaseModel):
    """Workflow definition as sent by the editor."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    name: str = ""
    nodes: list[NodeDefinitionSchema] | None = Field(
        None, description="List of nodes; an empty or missing list is rejected at run time"
    )
    connections: list[ConnectionSchema] = Field(default_factory=list)

    def to_workflow(self) -> Workflow:
        return workflow_from_dict(self.model_dump(by_alias=True))


class WorkflowExecuteRequest(BaseModel):
    """Request schema for ad-hoc workflow execution."""

    model_config = ConfigDict(populate_by_name=True)

    workflow: WorkflowSchema | None = None
    trigger_data: dict[str, Any] = Field(default_factory=dict, alias="triggerData")


class WebhookRegisterRequest(BaseModel):
    """Request schema for binding a webhook to a workflow."""

    model_config = ConfigDict(populate_by_name=True)

    workflow_id: str = Field(..., alias="workflowId")
    path: str | None = None
    method: str = "POST"
    auth: bool = False
    api_key: str | None = Field(None, alias="apiKey")
