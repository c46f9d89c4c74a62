from typing import Callable, List, Optional
import logging
import re
import threading
import time

from adapters import backend_client, recommendation_client
from app.config import settings
from app.exceptions import BackendError, NotFoundError
from domain.schemas.menu_schemas import FoodItem, SpecialDish

logger = logging.getLogger("storefront.menu")

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_name(name: Optional[str]) -> str:
    """Lower-case and drop everything but ASCII letters and digits."""
    return _NON_ALNUM.sub("", (name or "").lower())


def special_pricing(item: FoodItem) -> SpecialDish:
    """
    Offer shown for the dish of the day.

    The backend may send an explicit special price; otherwise it is the
    original price reduced by ``discount`` percent, rounded to a whole amount.
    """
    discount = item.discount or 0
    original = item.original_price or item.price
    if item.special_price:
        special = item.special_price
    elif discount > 0:
        special = round(original - (original * discount) / 100)
    else:
        special = original
    return SpecialDish(
        item=item,
        original_price=original,
        special_price=special,
        discount=discount,
        savings=original - special,
    )


class MenuCatalog:
    """
    Shared food list, fetched from the backend and cached for all visitors.

    A failed refresh keeps the previously loaded list. After a failure,
    lookups use that list without calling the backend again until
    ``retry_after`` seconds have passed; an explicit refresh always calls it.
    """

    def __init__(
        self,
        client_getter: Callable = backend_client.get_client,
        retry_after: Optional[float] = None,
    ):
        self._client_getter = client_getter
        self._retry_after = retry_after
        self._foods: List[FoodItem] = []
        self._loaded = False
        self._failed_at: Optional[float] = None
        self._lock = threading.Lock()

    def load_food_list(self) -> List[FoodItem]:
        try:
            raw = self._client_getter().list_foods()
        except BackendError as exc:
            logger.error("An error occurred while fetching the food list: %s", exc)
            with self._lock:
                self._failed_at = time.monotonic()
            return self.foods
        foods = []
        for entry in raw:
            try:
                foods.append(FoodItem.model_validate(entry))
            except ValueError as exc:
                logger.warning("Skipping malformed food entry %r: %s", entry, exc)
        with self._lock:
            self._foods = foods
            self._loaded = True
            self._failed_at = None
        logger.info("Loaded %d food items", len(foods))
        return foods

    @property
    def foods(self) -> List[FoodItem]:
        return list(self._foods)

    def ensure_loaded(self) -> List[FoodItem]:
        if self._loaded or self._recently_failed():
            return self.foods
        return self.load_food_list()

    def _recently_failed(self) -> bool:
        if self._failed_at is None:
            return False
        retry_after = settings.menu_retry_sec if self._retry_after is None else self._retry_after
        return time.monotonic() - self._failed_at < retry_after

    def get_food(self, food_id: str) -> Optional[FoodItem]:
        for item in self.ensure_loaded():
            if item.id == food_id:
                return item
        return None

    def require_food(self, food_id: str) -> FoodItem:
        item = self.get_food(food_id)
        if item is None:
            raise NotFoundError(f"Food item {food_id} not found")
        return item

    def find_by_name(self, name: str) -> Optional[FoodItem]:
        key = normalize_name(name)
        for item in self.ensure_loaded():
            if normalize_name(item.name) == key:
                return item
        return None

    def special_dish(self) -> Optional[SpecialDish]:
        for item in self.ensure_loaded():
            if item.is_special_today:
                return special_pricing(item)
        return None

    def special_recommendations(self) -> List[FoodItem]:
        names = set(recommendation_client.fetch_special_recommendations())
        return [item for item in self.ensure_loaded() if item.name in names]

    def reset(self):
        with self._lock:
            self._foods = []
            self._loaded = False
            self._failed_at = None


# Global catalog instance
catalog = MenuCatalog()
