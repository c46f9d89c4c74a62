"""Health check and utility routes"""

from fastapi import APIRouter
import logging

from api.responses import HealthResponse
from app.config import settings
from services.menu_service import catalog

router = APIRouter(tags=["Health"])
logger = logging.getLogger("storefront.api.health")


@router.get("/health-check", response_model=HealthResponse)
def health_check():
    """Basic health check endpoint"""
    return HealthResponse(
        status="ok",
        service=settings.app_name,
        version=settings.app_version,
        environment=settings.environment.value,
        food_items=len(catalog.foods),
    )


@router.get("/menu-status")
def menu_status():
    """Number of food items currently cached from the backend."""
    return {"food_items": len(catalog.foods), "backend_url": settings.backend_url}
