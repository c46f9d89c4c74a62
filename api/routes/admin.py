"""Admin order dashboard routes"""

from fastapi import APIRouter, Depends, Query
import logging

from api.dependencies import get_state
from api.responses import success_response
from domain.enums import AdminFilter
from services.admin_service import AdminService
from services.session_service import StorefrontState

router = APIRouter(prefix="/admin", tags=["Admin"])
logger = logging.getLogger("storefront.api.admin")


@router.get("/orders")
def dashboard(
    status: AdminFilter = Query(AdminFilter.ALL, description="Dashboard tab"),
    state: StorefrontState = Depends(get_state),
):
    """
    All orders, newest first, filtered by tab.

    The `pending` tab also lists orders whose status is "order placed".
    """
    return success_response(AdminService.dashboard(state, status))


@router.post("/orders/{order_id}/advance")
def advance_order(order_id: str, state: StorefrontState = Depends(get_state)):
    """Move an order to its next status (accepted, preparing, ready)."""
    card = AdminService.advance(state, order_id)
    return success_response(card, f"Order marked as {card.status}")
