"""API Routes."""

from fastapi import APIRouter

from .dashboard import router as dashboard_router
from .health import router as health_router
from .subscriptions import router as subscriptions_router

# Create main API router
api_router = APIRouter()

# Include route modules
api_router.include_router(health_router, tags=["Health"])
api_router.include_router(subscriptions_router)
api_router.include_router(dashboard_router)
