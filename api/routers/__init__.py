"""API routers (preferred import path)."""

from .grading import router as grading_router
from .submissions import router as submissions_router
from .system import router as system_router
from .violations import router as violations_router

__all__ = [
    "grading_router",
    "submissions_router",
    "system_router",
    "violations_router",
]
