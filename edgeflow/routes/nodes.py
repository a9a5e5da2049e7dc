"""Node catalog routes."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query

from ..core.dependencies import get_node_service
from ..core.exceptions import UnknownNodeTypeError
from ..schemas.node import NodeGroupSchema, NodeTypeSchema
from ..services.node_service import NodeService

router = APIRouter(prefix="/nodes")

NodeServiceDep = Annotated[NodeService, Depends(get_node_service)]


@router.get("", response_model=list[NodeTypeSchema])
async def list_nodes(
    service: NodeServiceDep,
    group: str | None = Query(None, description="Only node types in this palette group"),
) -> list[dict[str, Any]]:
    """List executable node types with their configuration forms."""
    return service.get_nodes_by_group(group) if group else service.list_nodes()


@router.get("/groups", response_model=list[NodeGroupSchema])
async def list_groups(service: NodeServiceDep) -> list[dict[str, Any]]:
    return service.list_groups()


@router.get("/{node_type}", response_model=NodeTypeSchema)
async def get_node_type(node_type: str, service: NodeServiceDep) -> dict[str, Any]:
    try:
        return service.get_node(node_type)
    except UnknownNodeTypeError as e:
        raise HTTPException(status_code=404, detail=e.message)
