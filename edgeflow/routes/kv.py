"""Direct key-value routes over the store the EDGE_KV node uses."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from ..core.dependencies import get_kv_service
from ..schemas.edge import KVBatchRequest, KVPutRequest
from ..services.kv_service import KVService

router = APIRouter(prefix="/kv")

KVServiceDep = Annotated[KVService, Depends(get_kv_service)]


@router.post("/batch")
async def batch_kv(request: KVBatchRequest, service: KVServiceDep) -> dict[str, Any]:
    """Run a list of get/put/delete/increment operations in order."""
    return await service.batch(request.operations)


@router.get("/{namespace}")
async def list_keys(
    namespace: str,
    service: KVServiceDep,
    prefix: str | None = Query(None, description="Only keys starting with this prefix"),
    limit: int | None = Query(None, description="Page size, capped by the configured limit"),
    cursor: str | None = Query(None, description="Cursor from the previous page"),
) -> dict[str, Any]:
    """List one page of keys in a namespace."""
    return await service.list(namespace, prefix=prefix, limit=limit, cursor=cursor)


@router.get("/{namespace}/{key:path}")
async def get_value(namespace: str, key: str, service: KVServiceDep) -> dict[str, Any]:
    return await service.get(namespace, key)


@router.put("/{namespace}/{key:path}")
@router.post("/{namespace}/{key:path}")
async def put_value(
    namespace: str, key: str, request: KVPutRequest, service: KVServiceDep
) -> dict[str, Any]:
    """Store a value, optionally with an expiration TTL and metadata."""
    return await service.put(
        namespace,
        key,
        request.value,
        expiration_ttl=request.expiration_ttl,
        metadata=request.metadata,
    )


@router.delete("/{namespace}/{key:path}")
async def delete_value(namespace: str, key: str, service: KVServiceDep) -> dict[str, Any]:
    return await service.delete(namespace, key)
