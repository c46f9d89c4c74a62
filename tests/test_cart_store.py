"""
Tests for the cart store.

This test suite covers the optimistic cart:
- Local changes for guests (no backend calls)
- Optimistic add/remove forwarded to the backend when logged in
- Per-line rollback when the backend refuses a change
- Reconciling with the backend's cart
- Merging a guest cart after login
- Totals and the platform fee
"""

import threading

import pytest
from unittest.mock import Mock

from app.exceptions import BackendError, CartSyncError
from domain.schemas.cart_schemas import CartLine
from services.cart_service import CartStore, platform_fee_for
from services.menu_service import MenuCatalog
from test_fixtures import DEFAULT_MENU


def make_catalog():
    backend = Mock()
    backend.list_foods.return_value = DEFAULT_MENU
    return MenuCatalog(client_getter=lambda: backend)


def make_store(token=None, lines=None):
    backend = Mock()
    backend.cart_get.return_value = {}
    store = CartStore(token_getter=lambda: token, lines=lines, client_getter=lambda: backend)
    return store, backend


# =============================================================================
# GUEST CART
# =============================================================================


def test_guest_add_and_remove_stay_local():
    store, backend = make_store()

    store.add_to_cart("food-dosa")
    store.add_to_cart("food-dosa")
    store.add_to_cart("food-chai", notes="less sugar")

    assert store.get_quantity("food-dosa") == 2
    assert store.get_notes("food-chai") == "less sugar"
    assert store.total_items() == 3

    store.remove_from_cart("food-dosa")
    store.remove_from_cart("food-chai")

    assert store.get_quantity("food-dosa") == 1
    assert "food-chai" not in store.lines
    backend.cart_add.assert_not_called()
    backend.cart_remove.assert_not_called()


def test_remove_absent_item_is_noop():
    store, backend = make_store(token="token-1")

    assert store.remove_from_cart("food-dosa") is None
    assert store.is_empty()
    backend.cart_remove.assert_not_called()


def test_add_keeps_notes_unless_given():
    store, _ = make_store()

    store.add_to_cart("food-dosa", notes="extra chutney")
    store.add_to_cart("food-dosa")
    assert store.get_notes("food-dosa") == "extra chutney"

    store.add_to_cart("food-dosa", notes="")
    assert store.get_notes("food-dosa") == ""
    assert store.get_quantity("food-dosa") == 3


def test_update_notes_only_for_present_lines():
    store, _ = make_store()
    store.add_to_cart("food-burger")

    assert store.update_notes("food-burger", "no onion").notes == "no onion"
    assert store.update_notes("food-thali", "spicy") is None
    assert "food-thali" not in store.lines


# =============================================================================
# OPTIMISTIC SYNC AND ROLLBACK
# =============================================================================


def test_logged_in_changes_are_forwarded():
    store, backend = make_store(token="token-1")

    store.add_to_cart("food-dosa", notes="crispy")
    store.remove_from_cart("food-dosa")

    backend.cart_add.assert_called_once_with("token-1", "food-dosa", "crispy")
    backend.cart_remove.assert_called_once_with("token-1", "food-dosa")


def test_failed_add_of_new_line_removes_it():
    store, backend = make_store(token="token-1")
    backend.cart_add.side_effect = BackendError("Cart service unavailable", status_code=500)

    with pytest.raises(CartSyncError) as exc_info:
        store.add_to_cart("food-dosa")

    assert exc_info.value.code == "CART_ADD_FAILED"
    assert exc_info.value.message == "Cart service unavailable"
    assert store.get_quantity("food-dosa") == 0
    assert store.is_empty()


def test_failed_add_restores_previous_quantity_and_notes():
    store, backend = make_store(
        token="token-1",
        lines={"food-dosa": CartLine(food_id="food-dosa", quantity=2, notes="crispy")},
    )
    backend.cart_add.side_effect = BackendError("nope", status_code=500)

    with pytest.raises(CartSyncError):
        store.add_to_cart("food-dosa", notes="soft")

    assert store.get_quantity("food-dosa") == 2
    assert store.get_notes("food-dosa") == "crispy"


def test_failed_remove_restores_line():
    store, backend = make_store(
        token="token-1",
        lines={
            "food-dosa": CartLine(food_id="food-dosa", quantity=1, notes="crispy"),
            "food-chai": CartLine(food_id="food-chai", quantity=3),
        },
    )
    backend.cart_remove.side_effect = BackendError(None)

    with pytest.raises(CartSyncError) as exc_info:
        store.remove_from_cart("food-dosa")

    assert exc_info.value.code == "CART_REMOVE_FAILED"
    assert store.get_quantity("food-dosa") == 1
    assert store.get_notes("food-dosa") == "crispy"
    # other lines are untouched by the rollback
    assert store.get_quantity("food-chai") == 3


# =============================================================================
# RECONCILE AND MERGE
# =============================================================================


def test_reconcile_replaces_quantities_and_keeps_notes():
    store, backend = make_store(
        token="token-1",
        lines={
            "food-dosa": CartLine(food_id="food-dosa", quantity=1, notes="crispy"),
            "food-chai": CartLine(food_id="food-chai", quantity=2),
        },
    )
    backend.cart_get.return_value = {"food-dosa": 3, "food-burger": 1, "food-chai": 0}

    lines = store.reconcile()

    assert set(lines) == {"food-dosa", "food-burger"}
    assert lines["food-dosa"].quantity == 3
    assert lines["food-dosa"].notes == "crispy"
    assert lines["food-burger"].notes == ""


def test_reconcile_accepts_structured_entries():
    store, backend = make_store(token="token-1")
    backend.cart_get.return_value = {"food-thali": {"quantity": 2, "notes": "no pickle"}}

    lines = store.reconcile()

    assert lines["food-thali"].quantity == 2
    assert lines["food-thali"].notes == "no pickle"


def test_reconcile_for_guest_does_not_call_backend():
    store, backend = make_store()
    store.add_to_cart("food-dosa")

    assert store.reconcile()["food-dosa"].quantity == 1
    backend.cart_get.assert_not_called()


def test_merge_guest_cart_pushes_every_unit():
    store, backend = make_store(
        token="token-1",
        lines={"food-dosa": CartLine(food_id="food-dosa", quantity=2, notes="crispy")},
    )
    backend.cart_get.return_value = {"food-dosa": 2, "food-chai": 1}

    assert store.merge_guest_cart() is True

    assert backend.cart_add.call_count == 2
    backend.cart_add.assert_called_with("token-1", "food-dosa", "crispy")
    assert store.get_quantity("food-chai") == 1
    assert store.get_notes("food-dosa") == "crispy"


def test_failed_merge_keeps_local_cart():
    store, backend = make_store(
        token="token-1",
        lines={"food-dosa": CartLine(food_id="food-dosa", quantity=2)},
    )
    backend.cart_add.side_effect = BackendError("down", status_code=503)

    assert store.merge_guest_cart() is False
    assert store.get_quantity("food-dosa") == 2
    backend.cart_get.assert_not_called()


# =============================================================================
# TOTALS
# =============================================================================


def test_platform_fee_only_for_non_empty_carts():
    assert platform_fee_for(0) == 0
    assert platform_fee_for(15) == 2


def test_view_totals():
    catalog = make_catalog()
    store, _ = make_store()
    store.add_to_cart("food-dosa")
    store.add_to_cart("food-chai")
    store.add_to_cart("food-chai")
    store.add_to_cart("food-chai")
    store.add_to_cart("food-burger")
    store.remove_from_cart("food-burger")

    view = store.view(catalog)

    # 60 + 3 * 15
    assert view.subtotal == 105
    assert view.platform_fee == 2
    assert view.total == 107
    assert view.total_items == 4
    assert [line.name for line in view.lines] == ["Masala Dosa", "Masala Chai"]


def test_unknown_foods_do_not_count_towards_subtotal():
    catalog = make_catalog()
    store, _ = make_store(
        lines={
            "food-burger": CartLine(food_id="food-burger", quantity=1),
            "food-gone": CartLine(food_id="food-gone", quantity=4),
        }
    )

    assert store.subtotal(catalog) == 80
    assert len(store.view(catalog).lines) == 1


def test_empty_cart_view():
    view = make_store()[0].view(make_catalog())

    assert view.is_empty
    assert view.subtotal == 0
    assert view.platform_fee == 0
    assert view.total == 0


def test_to_dict_round_trip_keeps_notes():
    store, _ = make_store()
    store.add_to_cart("food-thali", notes="no pickle")
    store.add_to_cart("food-thali")

    lines = CartStore.lines_from_dict(store.to_dict())

    assert lines["food-thali"].quantity == 2
    assert lines["food-thali"].notes == "no pickle"


def test_concurrent_adds_and_reads_agree():
    store, backend = make_store(token="token-1")
    seen = []

    def add_many():
        for _ in range(25):
            store.add_to_cart("food-chai")
            seen.append(store.get_quantity("food-chai"))

    workers = [threading.Thread(target=add_many) for _ in range(4)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()

    assert store.get_quantity("food-chai") == 100
    assert store.total_items() == 100
    assert not store.is_empty()
    assert max(seen) == 100
