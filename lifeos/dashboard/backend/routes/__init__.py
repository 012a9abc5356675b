"""Dashboard API Routes Package

This module aggregates all route handlers into a single router
that can be included in the main FastAPI application.
"""

from fastapi import APIRouter

from .auth import router as auth_router
from .finance import router as finance_router
from .pathfinder import router as pathfinder_router
from .roadmap import router as roadmap_router
from .tasks import router as tasks_router
from .vault import router as vault_router


# Create main API router
api_router = APIRouter(prefix="/api")

# Include all sub-routers
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(tasks_router, prefix="/tasks", tags=["tasks"])
api_router.include_router(roadmap_router, prefix="/roadmap", tags=["roadmap"])
api_router.include_router(pathfinder_router, prefix="/pathfinder", tags=["pathfinder"])
api_router.include_router(vault_router, prefix="/vault", tags=["vault"])
api_router.include_router(finance_router, tags=["finance"])

__all__ = ["api_router"]
