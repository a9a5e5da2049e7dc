"""Node catalog schemas for the editor palette."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NodeTypeSchema(BaseModel):
    """One executable node type and its configuration form."""

    model_config = ConfigDict(populate_by_name=True)

    type: str
    display_name: str = Field(..., alias="displayName")
    description: str
    icon: str | None = None
    group: list[str] | None = None
    properties: list[dict[str, Any]] = Field(default_factory=list)


class NodeGroupSchema(BaseModel):
    """A palette group and the node types in it."""

    name: str
    types: list[str]
