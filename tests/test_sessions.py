"""
Tests for storefront session persistence.

Sessions live in memory and are written to the session table after every
change, so a restarted process picks up the visitor's token, cart and chat.
"""

from app.config import settings
from domain.models import SessionLocal
from repositories import SessionRepository
from services.session_service import SessionService
from test_fixtures import client, fakes, login, session_headers


def test_session_id_is_echoed(fakes):
    r = client.get("/cart")
    headers = session_headers(r)

    r2 = client.get("/cart", headers=headers)

    assert r2.headers["X-Session-ID"] == headers["X-Session-ID"]


def test_guest_cart_restored_from_database(fakes):
    r = client.post("/cart/items/food-thali", json={"notes": "no pickle"})
    headers = session_headers(r)

    SessionService.forget_all()

    cart = client.get("/cart", headers=headers).json()["data"]
    assert cart["total_items"] == 1
    assert cart["lines"][0]["notes"] == "no pickle"


def test_login_restored_from_database(fakes):
    headers = login()
    client.post("/chat/messages", json={"message": "Hi"}, headers=headers)

    SessionService.forget_all()

    me = client.get("/auth/me", headers=headers).json()["data"]
    assert me["logged_in"] is True
    assert me["user"]["email"] == "asha@example.com"
    chat = client.get("/chat", headers=headers).json()["data"]
    assert [m["content"] for m in chat["messages"]][1] == "Hi"


def test_session_row_contents(fakes):
    headers = login()
    client.post("/cart/items/food-chai", headers=headers)

    db = SessionLocal()
    try:
        row = SessionRepository(db).get_by_id(headers["X-Session-ID"])
        assert row.token == fakes.backend.token_for("asha@example.com")
        assert row.user["role"] == "customer"
        assert row.cart == {"food-chai": {"quantity": 1, "notes": ""}}
    finally:
        db.close()


def test_logout_is_persisted(fakes):
    headers = login()
    client.post("/auth/logout", headers=headers)

    SessionService.forget_all()

    assert client.get("/auth/me", headers=headers).json()["data"]["logged_in"] is False


def test_session_registry_is_bounded(fakes, monkeypatch):
    monkeypatch.setattr(settings, "session_cache_size", 10)

    for _ in range(50):
        assert client.get("/cart").status_code == 200

    assert SessionService.active_count() == 10


def test_evicted_session_is_restored_from_database(fakes, monkeypatch):
    monkeypatch.setattr(settings, "session_cache_size", 3)
    r = client.post("/cart/items/food-biryani", json={"notes": "extra raita"})
    headers = session_headers(r)

    for _ in range(5):
        client.get("/cart")

    cart = client.get("/cart", headers=headers).json()["data"]
    assert cart["total_items"] == 1
    assert cart["lines"][0]["notes"] == "extra raita"
    assert SessionService.active_count() == 3
