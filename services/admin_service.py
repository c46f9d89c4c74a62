from typing import Dict, List, Optional
import logging

from adapters import backend_client
from app.config import settings
from app.exceptions import NotFoundError, ServiceValidationError, UnauthorizedError
from domain.enums import AdminFilter, OrderStatus
from domain.schemas.order_schemas import AdminDashboard, AdminOrderCard, Order
from services.session_service import StorefrontState

logger = logging.getLogger("storefront.admin")

_NEXT_STATUS = {
    OrderStatus.PENDING.value: OrderStatus.ACCEPTED.value,
    OrderStatus.ORDER_PLACED.value: OrderStatus.ACCEPTED.value,
    OrderStatus.ACCEPTED.value: OrderStatus.PREPARING.value,
    OrderStatus.PREPARING.value: OrderStatus.READY.value,
}

_NEXT_ACTION = {
    OrderStatus.PENDING.value: "Accept Order",
    OrderStatus.ORDER_PLACED.value: "Accept Order",
    OrderStatus.ACCEPTED.value: "Mark Preparing",
    OrderStatus.PREPARING.value: "Mark Ready",
}


def normalized_status(order: Order) -> str:
    """Lower-cased status; orders without one are pending."""
    return (order.status or "").lower() or OrderStatus.PENDING.value


def next_status(current: Optional[str]) -> Optional[str]:
    return _NEXT_STATUS.get((current or "").lower())


def next_action(current: Optional[str]) -> Optional[str]:
    return _NEXT_ACTION.get((current or "").lower())


def matches_filter(order: Order, status_filter: AdminFilter) -> bool:
    if status_filter == AdminFilter.ALL:
        return True
    status = normalized_status(order)
    if status_filter == AdminFilter.PENDING:
        return status in (OrderStatus.PENDING.value, OrderStatus.ORDER_PLACED.value)
    return status == status_filter.value


def _sort_key(order: Order):
    # newest first; undated orders last
    return order.created_at.timestamp() if order.created_at else float("-inf")


class AdminService:
    @staticmethod
    def require_admin(state: StorefrontState) -> str:
        if not state.token or not state.is_admin:
            raise UnauthorizedError("Admin access required")
        return state.token

    @staticmethod
    def fetch_orders(state: StorefrontState) -> List[Order]:
        token = AdminService.require_admin(state)
        raw = backend_client.get_client().admin_orders(token)
        orders = [Order.model_validate(o) for o in raw]
        orders.sort(key=_sort_key, reverse=True)
        state.admin_orders = orders
        return orders

    @staticmethod
    def filter_counts(orders: List[Order]) -> Dict[str, int]:
        return {f.value: sum(1 for o in orders if matches_filter(o, f)) for f in AdminFilter}

    @staticmethod
    def card(order: Order) -> AdminOrderCard:
        status = normalized_status(order)
        return AdminOrderCard(
            id=order.id,
            short_ref=order.short_ref,
            status=order.status or "Pending",
            amount=order.amount,
            created_at=order.created_at,
            items=order.items,
            next_action=next_action(status),
            ready_for_pickup=status == OrderStatus.READY.value,
        )

    @staticmethod
    def dashboard(
        state: StorefrontState, status_filter: AdminFilter = AdminFilter.ALL
    ) -> AdminDashboard:
        orders = AdminService.fetch_orders(state)
        return AdminDashboard(
            filter=status_filter.value,
            counts=AdminService.filter_counts(orders),
            orders=[AdminService.card(o) for o in orders if matches_filter(o, status_filter)],
            refresh_seconds=settings.admin_refresh_sec,
        )

    @staticmethod
    def advance(state: StorefrontState, order_id: str) -> AdminOrderCard:
        """Move an order one step along pending -> accepted -> preparing -> ready."""
        token = AdminService.require_admin(state)
        order = next((o for o in state.admin_orders if o.id == order_id), None)
        if order is None:
            order = next((o for o in AdminService.fetch_orders(state) if o.id == order_id), None)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found")

        new_status = next_status(normalized_status(order))
        if new_status is None:
            raise ServiceValidationError(
                f"Order #{order.short_ref} is already {order.status or 'final'}"
            )

        backend_client.get_client().update_order_status(token, order_id, new_status)
        logger.info("Order %s marked as %s", order_id, new_status)

        updated = order.model_copy(update={"status": new_status})
        state.admin_orders = [updated if o.id == order_id else o for o in state.admin_orders]
        return AdminService.card(updated)
