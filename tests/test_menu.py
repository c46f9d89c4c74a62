"""
Tests for menu browsing and the special dish of the day.

Covers:
- Parsing the backend's food documents
- Caching of the food list (a failed refresh keeps the last good list)
- Special dish pricing
- Name matching used by recommendations
- Menu endpoints
"""

from unittest.mock import Mock

from app.exceptions import BackendError
from domain.schemas.menu_schemas import FoodItem
from services.menu_service import MenuCatalog, catalog, normalize_name, special_pricing
from test_fixtures import DEFAULT_MENU, client, fakes, make_food, session_headers


# =============================================================================
# FOOD ITEMS AND PRICING
# =============================================================================


def test_food_item_accepts_backend_fields():
    item = FoodItem.model_validate(
        make_food("food-x", "Paneer Roll", 90, isSpecialToday="true", discount=None)
    )

    assert item.id == "food-x"
    assert item.is_special_today is True
    assert item.discount == 0


def test_special_flag_false_string():
    item = FoodItem.model_validate(make_food("food-x", "Paneer Roll", 90, isSpecialToday="false"))
    assert item.is_special_today is False


def test_special_pricing_from_discount():
    item = FoodItem.model_validate(make_food("food-thali", "Special Thali", 150, discount=20))

    special = special_pricing(item)

    assert special.original_price == 150
    assert special.special_price == 120
    assert special.savings == 30


def test_special_pricing_rounds_to_whole_amount():
    item = FoodItem.model_validate(make_food("food-x", "Samosa", 25, discount=15))

    # 25 - 3.75 = 21.25
    assert special_pricing(item).special_price == 21


def test_explicit_special_price_wins():
    item = FoodItem.model_validate(
        make_food("food-x", "Thali", 150, discount=20, originalPrice=160, specialPrice=99)
    )

    special = special_pricing(item)

    assert special.original_price == 160
    assert special.special_price == 99
    assert special.savings == 61


def test_no_discount_means_no_savings():
    item = FoodItem.model_validate(make_food("food-x", "Idli", 40))
    assert special_pricing(item).savings == 0


def test_normalize_name():
    assert normalize_name("Veg-Burger ") == "vegburger"
    assert normalize_name("Masala  Chai!") == "masalachai"
    assert normalize_name(None) == ""


# =============================================================================
# CATALOG
# =============================================================================


def test_failed_refresh_keeps_previous_list():
    backend = Mock()
    backend.list_foods.return_value = DEFAULT_MENU
    catalog = MenuCatalog(client_getter=lambda: backend)
    assert len(catalog.load_food_list()) == len(DEFAULT_MENU)

    backend.list_foods.side_effect = BackendError("db down", status_code=500)

    assert len(catalog.load_food_list()) == len(DEFAULT_MENU)
    assert catalog.get_food("food-dosa").name == "Masala Dosa"


def test_malformed_entries_are_skipped():
    backend = Mock()
    backend.list_foods.return_value = [{"name": "no id"}, make_food("food-ok", "Vada", 30)]
    catalog = MenuCatalog(client_getter=lambda: backend)

    assert [f.id for f in catalog.load_food_list()] == ["food-ok"]


def test_find_by_name_ignores_case_and_punctuation():
    backend = Mock()
    backend.list_foods.return_value = DEFAULT_MENU
    catalog = MenuCatalog(client_getter=lambda: backend)

    assert catalog.find_by_name("veg burger").id == "food-burger"
    assert catalog.find_by_name("MASALA-CHAI").id == "food-chai"
    assert catalog.find_by_name("Pizza") is None


def test_catalog_loads_once():
    backend = Mock()
    backend.list_foods.return_value = DEFAULT_MENU
    catalog = MenuCatalog(client_getter=lambda: backend)

    catalog.get_food("food-dosa")
    catalog.get_food("food-chai")

    assert backend.list_foods.call_count == 1


# =============================================================================
# ENDPOINTS
# =============================================================================


def test_list_menu(fakes):
    r = client.get("/menu")

    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    names = [f["name"] for f in body["data"]]
    assert names == ["Masala Dosa", "Veg Burger", "Masala Chai", "Special Thali", "Chicken Biryani"]


def test_menu_refresh_picks_up_new_items(fakes):
    client.get("/menu")
    fakes.backend.foods.append(make_food("food-vada", "Medu Vada", 35))

    assert len(client.get("/menu").json()["data"]) == 5
    assert len(client.get("/menu", params={"refresh": True}).json()["data"]) == 6


def test_get_food(fakes):
    r = client.get("/menu/food-biryani")

    assert r.status_code == 200
    assert r.json()["data"]["price"] == 140


def test_get_unknown_food(fakes):
    r = client.get("/menu/food-pizza")

    assert r.status_code == 404
    assert r.json()["error"]["code"] == "NOT_FOUND"


def test_special_dish_with_recommendations(fakes):
    r = client.get("/menu/special")

    assert r.status_code == 200
    data = r.json()["data"]
    assert data["special"]["item"]["name"] == "Special Thali"
    assert data["special"]["special_price"] == 120
    assert data["special"]["savings"] == 30
    assert [f["name"] for f in data["recommended"]] == ["Veg Burger", "Masala Chai"]


def test_no_special_dish(fakes):
    fakes.backend.foods = [f for f in fakes.backend.foods if f["_id"] != "food-thali"]

    data = client.get("/menu/special").json()["data"]

    assert data["special"] is None
    assert data["recommended"] == []


def test_special_recommendation_failure_is_tolerated(fakes):
    fakes.recommender.special = "not a dict"

    data = client.get("/menu/special").json()["data"]

    assert data["special"]["item"]["id"] == "food-thali"
    assert data["recommended"] == []


def test_outage_does_not_refetch_per_cart_line(fakes):
    r = client.post("/cart/items/food-dosa")
    headers = session_headers(r)
    client.post("/cart/items/food-burger", headers=headers)
    client.post("/cart/items/food-chai", headers=headers)
    fakes.backend.fail_foods = True
    catalog.reset()
    fakes.backend.calls.clear()

    r = client.get("/cart", headers=headers)

    assert r.status_code == 200
    assert fakes.backend.calls.count(("GET", "/api/foods/allFoods")) == 1


def test_failed_load_is_retried_after_wait():
    backend = Mock()
    backend.list_foods.side_effect = BackendError("db down", status_code=500)
    waiting = MenuCatalog(client_getter=lambda: backend, retry_after=3600)
    eager = MenuCatalog(client_getter=lambda: backend, retry_after=0)

    for catalog_ in (waiting, eager):
        catalog_.get_food("food-dosa")
        catalog_.get_food("food-chai")

    # one call for the waiting catalog, two for the one retrying at once
    assert backend.list_foods.call_count == 3

    backend.list_foods.side_effect = None
    backend.list_foods.return_value = DEFAULT_MENU
    assert waiting.load_food_list()[0].name == "Masala Dosa"
    assert waiting.get_food("food-chai").price == 15
