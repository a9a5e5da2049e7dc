"""Common schemas used across the API."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    success: bool = True
    status: str = "healthy"
    version: str
    timestamp: str
    edge: dict[str, str]


class RootResponse(BaseModel):
    """Root endpoint response."""

    name: str
    version: str
    status: str
