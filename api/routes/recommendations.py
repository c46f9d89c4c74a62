"""
Recommendation routes - popular and similar dishes for the storefront widgets.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
import logging

from api.dependencies import get_db, get_state
from api.responses import success_response
from services.menu_service import catalog
from services.recommendation_service import RecommendationService
from services.session_service import StorefrontState

router = APIRouter(prefix="/recommendations", tags=["Recommendations"])
logger = logging.getLogger("storefront.api.recommendations")


@router.get("/popular")
def popular_items(
    limit: int = Query(5, ge=0, le=50),
    window_days: Optional[int] = Query(None, description="Only count orders from the last N days"),
):
    """
    Most ordered dishes.

    A failing recommendation service does not fail the request: `data.error`
    carries the message for the widget to show next to a retry button.
    """
    return success_response(RecommendationService.popular(limit, window_days))


@router.get("/similar")
def similar_items(
    item_name: str = Query("burger"),
    limit: int = Query(6, ge=0, le=50),
):
    """Dishes similar to `item_name`, flagged with their menu availability and price"""
    return success_response(RecommendationService.similar(item_name, limit))


@router.post("/add")
def add_recommended(
    item_name: str = Query(..., min_length=1),
    state: StorefrontState = Depends(get_state),
    db: Session = Depends(get_db),
):
    """Add a recommended dish to the cart by name."""
    RecommendationService.add_recommended(db, state, item_name)
    return success_response(state.cart.view(catalog))
