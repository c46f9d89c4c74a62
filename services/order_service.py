from typing import List, Optional
from sqlalchemy.orm import Session
import logging

from adapters import backend_client
from app.config import settings
from app.exceptions import BackendError, NotFoundError, ServiceValidationError
from domain.enums import TRACKING_STAGES
from domain.schemas.order_schemas import (
    CheckoutSummary,
    MyOrderView,
    MyOrdersResponse,
    Order,
    PlaceOrderRequest,
    PlacedOrder,
    TrackingView,
)
from services.auth_service import AuthService
from services.cart_service import platform_fee_for
from services.loyalty import checkout_notice, loyalty_status
from services.menu_service import MenuCatalog, catalog as default_catalog
from services.session_service import SessionService, StorefrontState

logger = logging.getLogger("storefront.orders")


def stage_index(status: Optional[str]) -> int:
    """Position of ``status`` among the tracking stages, -1 when it is not one of them."""
    wanted = (status or "").lower()
    for index, stage in enumerate(TRACKING_STAGES):
        if stage.lower() == wanted:
            return index
    return -1


class OrderService:
    @staticmethod
    def order_count(state: StorefrontState) -> Optional[int]:
        """Number of orders the visitor has placed; None when the backend cannot say."""
        token = AuthService.require_login(state)
        try:
            return len(backend_client.get_client().all_orders(token))
        except BackendError as exc:
            logger.error("Error fetching orders: %s", exc)
            return None

    @staticmethod
    def checkout_summary(
        state: StorefrontState, catalog: MenuCatalog = default_catalog
    ) -> CheckoutSummary:
        AuthService.require_login(state)
        subtotal = state.cart.subtotal(catalog)
        if subtotal == 0:
            raise ServiceValidationError("Please add items to your cart")

        fee = platform_fee_for(subtotal)
        count = OrderService.order_count(state)
        loyalty = loyalty_status(count) if count is not None else None
        return CheckoutSummary(
            subtotal=subtotal,
            platform_fee=fee,
            total=subtotal + fee,
            total_items=state.cart.total_items(),
            loyalty=loyalty,
            loyalty_notice=checkout_notice(loyalty) if loyalty else None,
        )

    @staticmethod
    def place_order(
        db: Session,
        state: StorefrontState,
        request: PlaceOrderRequest,
        catalog: MenuCatalog = default_catalog,
    ) -> PlacedOrder:
        """
        Place the visitor's cart as an order.

        Preconditions, in the order they are checked:
        - a logged-in visitor
        - every delivery field filled in
        - at least one cart line whose food is still on the menu

        On success the local cart is emptied; totals reported are those of the
        cart that was ordered.
        """
        token = AuthService.require_login(state)
        if not request.delivery_details.is_complete():
            raise ServiceValidationError("Please fill all delivery details")

        items = []
        for food_id, line in state.cart.lines.items():
            if line.quantity > 0 and catalog.get_food(food_id) is not None:
                items.append(
                    {"foodId": food_id, "quantity": line.quantity, "notes": line.notes}
                )
        if not items:
            raise ServiceValidationError("Your cart is empty!")

        subtotal = state.cart.subtotal(catalog)
        fee = platform_fee_for(subtotal)
        order_data = {
            "deliveryDetails": request.delivery_details.to_backend(),
            "paymentMethod": request.payment_method.value,
            "items": items,
            "amount": subtotal + fee,
        }

        response = backend_client.get_client().create_order(token, order_data)
        created = response.get("data") if isinstance(response, dict) else None
        order_id = None
        if isinstance(created, dict):
            order_id = created.get("_id") or created.get("id")
        order_id = order_id or (response.get("orderId") if isinstance(response, dict) else None)

        state.cart.clear()
        SessionService.save(db, state)
        logger.info("Order %s placed for session %s", order_id, state.session_id[:8])
        return PlacedOrder(
            order_id=order_id,
            subtotal=subtotal,
            platform_fee=fee,
            total=subtotal + fee,
            message="Order placed successfully!",
        )

    @staticmethod
    def my_orders(state: StorefrontState) -> MyOrdersResponse:
        token = AuthService.require_login(state)
        raw = backend_client.get_client().user_orders(token)
        orders: List[Order] = [Order.model_validate(o) for o in raw]
        return MyOrdersResponse(
            orders=[
                MyOrderView(
                    id=o.id,
                    items_summary=o.items_summary,
                    item_count=len(o.items),
                    amount=o.amount,
                    status=o.status,
                )
                for o in orders
            ],
            loyalty=loyalty_status(len(orders)),
        )

    @staticmethod
    def track_order(state: StorefrontState, order_id: str) -> TrackingView:
        token = AuthService.require_login(state)
        try:
            raw = backend_client.get_client().order_status(token, order_id)
        except BackendError as exc:
            if exc.status_code == 404:
                raise NotFoundError("Order not found or expired.") from exc
            raise
        if not raw:
            raise NotFoundError("Order not found or expired.")
        order = Order.model_validate(raw)
        return TrackingView(
            order_id=order.id,
            status=order.status,
            total_amount=order.display_amount,
            stages=list(TRACKING_STAGES),
            current_stage_index=stage_index(order.status),
            items=order.items,
            refresh_seconds=settings.track_refresh_sec,
        )
