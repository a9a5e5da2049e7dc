"""FastAPI routes for the EdgeFlow engine."""

from .api import router as api_router

__all__ = [
    "api_router",
]
