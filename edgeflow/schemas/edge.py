"""Request schemas for the direct KV and AI routes."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class KVPutRequest(BaseModel):
    """Body of PUT/POST /api/kv/{namespace}/{key}."""

    model_config = ConfigDict(populate_by_name=True)

    value: Any = Field(None, description="JSON value to store")
    expiration_ttl: int | None = Field(
        None, alias="expirationTtl", description="Seconds until the key expires"
    )
    metadata: dict[str, Any] | None = None


class KVBatchRequest(BaseModel):
    """A list of ``{action, namespace, key, ...}`` operations run in order."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "operations": [
                    {"action": "put", "namespace": "users", "key": "u1", "value": {"name": "Ada"}},
                    {"action": "increment", "namespace": "stats", "key": "visits"},
                ]
            }
        }
    )

    operations: list[dict[str, Any]] = Field(default_factory=list)


class AIProcessRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "action": "classify",
                "data": {"content": "Buy cheap watches now"},
                "config": {"categories": "normal,spam"},
            }
        }
    )

    action: str
    data: Any = None
    config: dict[str, Any] = Field(default_factory=dict)


class AIBatchRequest(BaseModel):
    action: str = Field(..., description="classify or summarize")
    items: list[Any] = Field(default_factory=list)
    config: dict[str, Any] = Field(default_factory=dict)
