"""Execution history routes."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query

from ..core.dependencies import get_execution_service
from ..core.exceptions import ExecutionNotFoundError
from ..schemas.execution import ExecutionListResponse
from ..services.execution_service import ExecutionService

router = APIRouter(prefix="/executions")


# Type alias for dependency injection
ExecutionServiceDep = Annotated[ExecutionService, Depends(get_execution_service)]


@router.get("", response_model=ExecutionListResponse)
async def list_executions(
    service: ExecutionServiceDep,
    workflow_id: str | None = Query(None, alias="workflowId", description="Filter by workflow ID"),
) -> dict[str, Any]:
    """List execution history."""
    return {"success": True, "executions": service.list_executions(workflow_id)}


@router.get("/{execution_id}")
async def get_execution(
    execution_id: str,
    service: ExecutionServiceDep,
) -> dict[str, Any]:
    """Get the full run record of one execution."""
    try:
        return service.get_execution(execution_id).to_dict()
    except ExecutionNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.delete("")
async def clear_executions(service: ExecutionServiceDep) -> dict[str, Any]:
    """Clear all execution records."""
    count = service.clear_executions()
    return {"success": True, "message": f"Cleared {count} execution records"}
