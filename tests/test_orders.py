"""
Tests for checkout, order placement, order history and tracking.

Order Flow
==========

1. GET  /orders/checkout       totals of the cart and the loyalty notice
2. POST /orders                {"delivery_details": {...}, "payment_method": "COD"}
3. GET  /orders/mine           past orders with Foodie Rewards progress
4. GET  /orders/{id}/track     status among Pending, Preparing, Out for Delivery, Delivered
"""

from domain.schemas.order_schemas import Order
from services.order_service import stage_index
from test_fixtures import client, fakes, login

DELIVERY = {"name": "Asha", "phone": "9876543210", "hostel": "H4", "roomNo": "212"}


def fill_cart(headers, *food_ids):
    for food_id in food_ids:
        r = client.post(f"/cart/items/{food_id}", headers=headers)
        assert r.status_code == 200, r.text


# =============================================================================
# PLACE ORDER
# =============================================================================


def test_place_order(fakes):
    headers = login()
    fill_cart(headers, "food-dosa", "food-dosa", "food-chai")
    client.patch("/cart/items/food-dosa/notes", json={"notes": "extra chutney"}, headers=headers)

    r = client.post(
        "/orders", json={"delivery_details": DELIVERY, "payment_method": "COD"}, headers=headers
    )

    assert r.status_code == 201, r.text
    body = r.json()
    assert body["message"] == "Order placed successfully!"
    assert body["data"]["subtotal"] == 135
    assert body["data"]["platform_fee"] == 2
    assert body["data"]["total"] == 137

    order = fakes.backend.orders[-1]
    assert body["data"]["order_id"] == order["_id"]
    assert order["amount"] == 137
    assert order["paymentMethod"] == "COD"
    assert order["deliveryDetails"] == DELIVERY
    assert {i["foodId"]: i["quantity"] for i in order["items"]} == {"food-dosa": 2, "food-chai": 1}

    cart = client.get("/cart", headers=headers).json()["data"]
    assert cart["is_empty"] is True


def test_place_order_requires_login(fakes):
    r = client.post("/orders", json={"delivery_details": DELIVERY})

    assert r.status_code == 401
    assert r.json()["error"]["message"] == "Please login first"


def test_place_order_requires_delivery_details(fakes):
    headers = login()
    fill_cart(headers, "food-dosa")

    r = client.post(
        "/orders", json={"delivery_details": {**DELIVERY, "hostel": "   "}}, headers=headers
    )

    assert r.status_code == 400
    assert r.json()["error"]["message"] == "Please fill all delivery details"
    assert fakes.backend.orders == []


def test_place_order_with_empty_cart(fakes):
    headers = login()

    r = client.post("/orders", json={"delivery_details": DELIVERY}, headers=headers)

    assert r.status_code == 400
    assert r.json()["error"]["message"] == "Your cart is empty!"


def test_items_no_longer_on_menu_are_not_ordered(fakes):
    headers = login()
    fill_cart(headers, "food-burger", "food-chai")
    fakes.backend.foods = [f for f in fakes.backend.foods if f["_id"] != "food-burger"]
    client.get("/menu", params={"refresh": True})

    r = client.post("/orders", json={"delivery_details": DELIVERY}, headers=headers)

    assert r.status_code == 201, r.text
    assert r.json()["data"]["total"] == 17
    assert [i["foodId"] for i in fakes.backend.orders[-1]["items"]] == ["food-chai"]


# =============================================================================
# CHECKOUT SUMMARY
# =============================================================================


def test_checkout_summary(fakes):
    headers = login()
    fill_cart(headers, "food-biryani")

    data = client.get("/orders/checkout", headers=headers).json()["data"]

    assert data["subtotal"] == 140
    assert data["total"] == 142
    assert data["loyalty"]["order_count"] == 0
    assert data["loyalty_notice"] is None


def test_checkout_announces_reward_order(fakes):
    token = fakes.backend.token_for("asha@example.com")
    for _ in range(5):
        fakes.backend.add_order(token, status="Delivered")
    headers = login()
    fill_cart(headers, "food-chai")

    data = client.get("/orders/checkout", headers=headers).json()["data"]

    assert data["loyalty"]["next_order_is_reward"] is True
    assert data["loyalty_notice"] == "It's your 6th order! You'll receive a complimentary item soon!"


def test_checkout_with_empty_cart(fakes):
    headers = login()

    r = client.get("/orders/checkout", headers=headers)

    assert r.status_code == 400
    assert r.json()["error"]["message"] == "Please add items to your cart"


# =============================================================================
# ORDER HISTORY AND TRACKING
# =============================================================================


def test_my_orders(fakes):
    token = fakes.backend.token_for("asha@example.com")
    fakes.backend.add_order(
        token,
        amount=137,
        items=[
            {"name": "Masala Dosa", "quantity": 2, "foodId": "food-dosa"},
            {"quantity": 1, "foodId": {"_id": "food-chai", "name": "Masala Chai"}},
        ],
    )
    fakes.backend.add_order(fakes.backend.token_for("admin@example.com"))
    headers = login()

    data = client.get("/orders/mine", headers=headers).json()["data"]

    assert len(data["orders"]) == 1
    assert data["orders"][0]["items_summary"] == "Masala Dosa × 2, Masala Chai × 1"
    assert data["orders"][0]["item_count"] == 2
    assert data["orders"][0]["amount"] == 137
    assert data["loyalty"]["order_count"] == 1
    assert data["loyalty"]["orders_until_free"] == 5


def test_my_orders_requires_login(fakes):
    assert client.get("/orders/mine").status_code == 401


def test_track_order(fakes):
    token = fakes.backend.token_for("asha@example.com")
    order = fakes.backend.add_order(token, status="Preparing", amount=62)
    headers = login()

    data = client.get(f"/orders/{order['_id']}/track", headers=headers).json()["data"]

    assert data["status"] == "Preparing"
    assert data["current_stage_index"] == 1
    assert data["stages"] == ["Pending", "Preparing", "Out for Delivery", "Delivered"]
    assert data["total_amount"] == 62
    assert data["refresh_seconds"] == 10


def test_track_unknown_order(fakes):
    headers = login()

    r = client.get("/orders/does-not-exist/track", headers=headers)

    assert r.status_code == 404
    assert r.json()["error"]["message"] == "Order not found or expired."


def test_stage_index():
    assert stage_index("Pending") == 0
    assert stage_index("out for delivery") == 2
    assert stage_index("Order Placed") == -1
    assert stage_index(None) == -1


def test_total_amount_preferred_over_amount():
    order = Order.model_validate({"_id": "abc123456789", "amount": 50, "totalAmount": 52})

    assert order.display_amount == 52
    assert order.short_ref == "456789"


def test_track_order_missing_with_http_404(fakes):
    fakes.backend.missing_order_status = 404
    headers = login()

    r = client.get("/orders/expired-order/track", headers=headers)

    assert r.status_code == 404
    assert r.json()["error"]["code"] == "NOT_FOUND"
    assert r.json()["error"]["message"] == "Order not found or expired."
