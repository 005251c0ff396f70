"""API module exports."""

from src.api.estimate import router as estimate_router
from src.api.health import router as health_router

__all__ = [
    "estimate_router",
    "health_router",
]
