"""Checkout, order history and tracking routes"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_db, get_state
from api.responses import success_response
from domain.schemas.order_schemas import PlaceOrderRequest
from services.order_service import OrderService
from services.session_service import StorefrontState

router = APIRouter(prefix="/orders", tags=["Orders"])
logger = logging.getLogger("storefront.api.orders")


@router.get("/checkout")
def checkout_summary(state: StorefrontState = Depends(get_state)):
    """Subtotal, platform fee, total and the loyalty notice for the current cart"""
    return success_response(OrderService.checkout_summary(state))


@router.post("", status_code=status.HTTP_201_CREATED)
def place_order(
    payload: PlaceOrderRequest,
    state: StorefrontState = Depends(get_state),
    db: Session = Depends(get_db),
):
    """
    Place the cart as an order (cash on delivery unless stated otherwise).

    Example body:
        {
            "delivery_details": {"name": "Asha", "phone": "9876543210",
                                 "hostel": "H4", "roomNo": "212"},
            "payment_method": "COD"
        }
    """
    placed = OrderService.place_order(db, state, payload)
    return success_response(placed, placed.message)


@router.get("/mine")
def my_orders(state: StorefrontState = Depends(get_state)):
    """Orders of the logged-in visitor and their Foodie Rewards progress"""
    return success_response(OrderService.my_orders(state))


@router.get("/{order_id}/track")
def track_order(order_id: str, state: StorefrontState = Depends(get_state)):
    return success_response(OrderService.track_order(state, order_id))
