"""Execution-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class ExecutionListItem(BaseModel):
    """Schema for a run in the history list."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    workflow_id: str | None = Field(None, alias="workflowId")
    workflow_name: str | None = Field(None, alias="workflowName")
    status: str
    start_time: str = Field(..., alias="startTime")
    duration: int
    nodes_executed: int = Field(..., alias="nodesExecuted")
    error: str | None = None


class ExecutionListResponse(BaseModel):
    success: bool = True
    executions: list[ExecutionListItem]
