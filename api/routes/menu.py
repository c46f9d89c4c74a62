"""Menu browsing routes"""

from fastapi import APIRouter, Query
import logging

from api.responses import success_response
from services.menu_service import catalog
from services.recommendation_service import RecommendationService

router = APIRouter(prefix="/menu", tags=["Menu"])
logger = logging.getLogger("storefront.api.menu")


@router.get("")
def list_menu(refresh: bool = Query(False, description="Reload the list from the backend")):
    """All food items on the menu"""
    foods = catalog.load_food_list() if refresh else catalog.ensure_loaded()
    return success_response(foods)


@router.get("/special")
def special_dish():
    """
    Special dish of the day with its discounted price, plus the dishes the
    ML service suggests alongside it.

    `data.special` is null when no dish is flagged as today's special.
    """
    return success_response(RecommendationService.special_of_the_day())


@router.get("/{food_id}")
def get_food(food_id: str):
    return success_response(catalog.require_food(food_id))
