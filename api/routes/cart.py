"""Cart routes"""

from fastapi import APIRouter, Depends
from typing import Optional
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_db, get_state
from api.responses import success_response
from app.exceptions import NotFoundError
from domain.schemas.cart_schemas import AddToCartRequest, CartNotesUpdate
from services.menu_service import catalog
from services.session_service import SessionService, StorefrontState

router = APIRouter(prefix="/cart", tags=["Cart"])
logger = logging.getLogger("storefront.api.cart")


@router.get("")
def get_cart(state: StorefrontState = Depends(get_state)):
    """Cart lines joined with the menu, item count and totals"""
    return success_response(state.cart.view(catalog))


@router.post("/items/{food_id}")
def add_item(
    food_id: str,
    payload: Optional[AddToCartRequest] = None,
    state: StorefrontState = Depends(get_state),
    db: Session = Depends(get_db),
):
    """
    Add one unit of a dish.

    The change is visible immediately; when the backend rejects it the cart is
    put back and the request fails with the backend's message.
    """
    catalog.require_food(food_id)
    state.cart.add_to_cart(food_id, payload.notes if payload else None)
    SessionService.save(db, state)
    return success_response(state.cart.view(catalog))


@router.delete("/items/{food_id}")
def remove_item(
    food_id: str,
    state: StorefrontState = Depends(get_state),
    db: Session = Depends(get_db),
):
    """Remove one unit of a dish; the line disappears at zero."""
    state.cart.remove_from_cart(food_id)
    SessionService.save(db, state)
    return success_response(state.cart.view(catalog))


@router.patch("/items/{food_id}/notes")
def update_notes(
    food_id: str,
    payload: CartNotesUpdate,
    state: StorefrontState = Depends(get_state),
    db: Session = Depends(get_db),
):
    if state.cart.update_notes(food_id, payload.notes) is None:
        raise NotFoundError(f"Food item {food_id} is not in the cart")
    SessionService.save(db, state)
    return success_response(state.cart.view(catalog))


@router.post("/sync")
def sync_cart(state: StorefrontState = Depends(get_state), db: Session = Depends(get_db)):
    """Replace local quantities with the backend's cart."""
    state.cart.reconcile()
    SessionService.save(db, state)
    return success_response(state.cart.view(catalog))
