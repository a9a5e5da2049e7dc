"""Workflow execution and template routes."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException

from ..core.dependencies import get_execution_service, get_schedule_service, get_workflow_store
from ..core.exceptions import InvalidWorkflowError, WorkflowNotFoundError
from ..schemas.workflow import WebhookRegisterRequest, WorkflowExecuteRequest, WorkflowSchema
from ..services.execution_service import ExecutionService
from ..services.schedule_service import ScheduleService
from ..storage.workflow_store import WorkflowStore

logger = logging.getLogger(__name__)

router = APIRouter()


# Type aliases for dependency injection
ExecutionServiceDep = Annotated[ExecutionService, Depends(get_execution_service)]
ScheduleServiceDep = Annotated[ScheduleService, Depends(get_schedule_service)]
WorkflowStoreDep = Annotated[WorkflowStore, Depends(get_workflow_store)]


@router.post("/workflow/execute")
async def execute_workflow(
    request: WorkflowExecuteRequest,
    service: ExecutionServiceDep,
) -> dict[str, Any]:
    """Run a workflow definition once with the given trigger data."""
    if request.workflow is None:
        return {"success": False, "error": "Invalid workflow"}

    try:
        record = await service.execute(request.workflow.to_workflow(), request.trigger_data)
    except InvalidWorkflowError as e:
        return {"success": False, "error": e.message, "details": e.details}

    return record.to_dict()


@router.post("/workflows")
async def save_workflow(workflow: WorkflowSchema, store: WorkflowStoreDep) -> dict[str, Any]:
    """Store a workflow so webhooks and schedules can run it."""
    saved = store.save(workflow.to_workflow())
    return {"success": True, "id": saved.id, "name": saved.name}


@router.post("/workflows/{workflow_id}/schedule")
async def fire_schedule(workflow_id: str, service: ScheduleServiceDep) -> dict[str, Any]:
    """Run a stored workflow as one timer tick."""
    try:
        record = await service.fire(workflow_id)
    except WorkflowNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except InvalidWorkflowError as e:
        return {"success": False, "error": e.message, "details": e.details}
    return record.to_dict()


@router.post("/webhooks")
async def register_webhook(request: WebhookRegisterRequest, store: WorkflowStoreDep) -> dict[str, Any]:
    """Bind a new webhook id to a stored workflow."""
    if store.get(request.workflow_id) is None:
        raise HTTPException(status_code=404, detail=f"Workflow not found: {request.workflow_id}")

    registration = store.register_webhook(
        request.workflow_id,
        path=request.path,
        method=request.method,
        auth=request.auth,
        api_key=request.api_key,
    )
    return {
        "success": True,
        "webhook": registration.to_dict(),
        "url": f"/api/webhook/{registration.id}",
    }


@router.get("/templates")
async def list_templates(store: WorkflowStoreDep) -> dict[str, Any]:
    """List starter workflow templates."""
    return {"success": True, "templates": store.templates()}
