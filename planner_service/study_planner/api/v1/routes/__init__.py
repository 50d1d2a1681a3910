"""Route module exports for API v1."""

from .documents import router as documents_router
from .health import router as health_router
from .plans import router as plans_router

__all__ = ["documents_router", "health_router", "plans_router"]
