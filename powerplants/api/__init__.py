"""API router definitions."""

from fastapi import APIRouter

from .power_plants import router as power_plants_router
from .routes import health_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(power_plants_router)

__all__ = ["api_router"]
