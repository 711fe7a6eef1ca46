"""API routers."""
from .monitors import router as monitors_router
from .monitor_types import router as monitor_types_router
from .intervals import router as intervals_router

__all__ = ["monitors_router", "monitor_types_router", "intervals_router"]
