"""Recommendation widgets: popular and similar items joined with the live menu."""

from typing import Any, List, Optional
from sqlalchemy.orm import Session
import logging

from adapters import recommendation_client
from app.exceptions import NotFoundError
from domain.schemas.cart_schemas import CartLine
from domain.schemas.menu_schemas import SpecialDishResponse
from domain.schemas.recommendation_schemas import (
    Recommendation,
    RecommendationsResponse,
    RecommendedItem,
)
from services.menu_service import MenuCatalog, catalog as default_catalog
from services.session_service import SessionService, StorefrontState

logger = logging.getLogger("storefront.recommendations")


def _extract_items(data: Any) -> List[Any]:
    # the service answers either a bare list or {"recommendations": [...]}
    if isinstance(data, dict):
        return list(data.get("recommendations") or [])
    if isinstance(data, list):
        return data
    return []


class RecommendationService:
    @staticmethod
    def join_with_menu(
        raw_items: List[Any], catalog: MenuCatalog = default_catalog
    ) -> List[RecommendedItem]:
        joined = []
        for raw in raw_items:
            if isinstance(raw, str):
                raw = {"item_name": raw}
            rec = Recommendation.model_validate(raw)
            food = catalog.find_by_name(rec.item_name)
            joined.append(
                RecommendedItem(
                    item_name=rec.item_name,
                    order_count=rec.order_count,
                    food_id=food.id if food else None,
                    price=food.price if food else None,
                    available=food is not None,
                )
            )
        return joined

    @staticmethod
    def similar(
        item_name: str, limit: int = 6, catalog: MenuCatalog = default_catalog
    ) -> RecommendationsResponse:
        result = recommendation_client.get_client().fetch_similar(item_name, limit)
        if not result.success:
            logger.warning("Similar items unavailable: %s", result.error)
            return RecommendationsResponse(error=result.error or "Failed to load similar items")
        return RecommendationsResponse(
            items=RecommendationService.join_with_menu(_extract_items(result.data), catalog)
        )

    @staticmethod
    def popular(
        limit: int = 5,
        window_days: Optional[int] = None,
        catalog: MenuCatalog = default_catalog,
    ) -> RecommendationsResponse:
        result = recommendation_client.get_client().fetch_popular(limit, window_days)
        if not result.success:
            logger.warning("Popular items unavailable: %s", result.error)
            return RecommendationsResponse(error=result.error or "Failed to load popular items")
        return RecommendationsResponse(
            items=RecommendationService.join_with_menu(_extract_items(result.data), catalog)
        )

    @staticmethod
    def add_recommended(
        db: Session,
        state: StorefrontState,
        item_name: str,
        catalog: MenuCatalog = default_catalog,
    ) -> CartLine:
        food = catalog.find_by_name(item_name)
        if food is None:
            raise NotFoundError(f"{item_name} is not available in the menu right now.")
        line = state.cart.add_to_cart(food.id)
        SessionService.save(db, state)
        return line

    @staticmethod
    def special_of_the_day(catalog: MenuCatalog = default_catalog) -> SpecialDishResponse:
        special = catalog.special_dish()
        if special is None:
            return SpecialDishResponse()
        return SpecialDishResponse(
            special=special, recommended=catalog.special_recommendations()
        )
