"""
Cart store with optimistic synchronization against the canteen backend.

Every mutation is applied locally first so the visitor sees it immediately,
then forwarded to the backend when the visitor is logged in. If the backend
refuses it, the affected line is put back the way it was and a CartSyncError
is raised for the caller to report.
"""

from typing import Any, Callable, Dict, List, Optional
import logging
import threading

from adapters import backend_client
from app.config import settings
from app.exceptions import BackendError, CartSyncError
from domain.schemas.cart_schemas import CartLine, CartLineView, CartView

logger = logging.getLogger("storefront.cart")


def platform_fee_for(subtotal: float) -> float:
    return settings.platform_fee if subtotal > 0 else 0


class CartStore:
    def __init__(
        self,
        token_getter: Callable[[], Optional[str]],
        lines: Optional[Dict[str, CartLine]] = None,
        client_getter: Callable = backend_client.get_client,
    ):
        self._token_getter = token_getter
        self._client_getter = client_getter
        self._lines: Dict[str, CartLine] = dict(lines or {})
        self._lock = threading.Lock()

    # ------------------ Mutations ------------------
    def add_to_cart(self, food_id: str, notes: Optional[str] = None) -> CartLine:
        """Add one unit; ``notes`` replaces the line's notes only when given."""
        with self._lock:
            previous = self._copy(food_id)
            line = self._lines.get(food_id)
            if line is None:
                line = CartLine(food_id=food_id, quantity=1, notes=notes or "")
            else:
                line = line.model_copy(
                    update={
                        "quantity": line.quantity + 1,
                        "notes": notes if notes is not None else line.notes,
                    }
                )
            self._lines[food_id] = line

        token = self._token_getter()
        if token:
            try:
                self._client_getter().cart_add(token, food_id, notes)
            except BackendError as exc:
                self._rollback(food_id, previous)
                raise CartSyncError(
                    exc.message, status_code=exc.status_code, code="CART_ADD_FAILED"
                ) from exc
        return line

    def remove_from_cart(self, food_id: str) -> Optional[CartLine]:
        """Remove one unit; the line disappears when its last unit goes."""
        with self._lock:
            previous = self._copy(food_id)
            if previous is None:
                return None
            if previous.quantity > 1:
                line = previous.model_copy(update={"quantity": previous.quantity - 1})
                self._lines[food_id] = line
            else:
                line = None
                del self._lines[food_id]

        token = self._token_getter()
        if token:
            try:
                self._client_getter().cart_remove(token, food_id)
            except BackendError as exc:
                self._rollback(food_id, previous)
                raise CartSyncError(
                    exc.message, status_code=exc.status_code, code="CART_REMOVE_FAILED"
                ) from exc
        return line

    def update_notes(self, food_id: str, notes: str) -> Optional[CartLine]:
        with self._lock:
            line = self._lines.get(food_id)
            if line is None:
                return None
            line = line.model_copy(update={"notes": notes})
            self._lines[food_id] = line
            return line

    def clear(self):
        with self._lock:
            self._lines = {}

    def reconcile(self) -> Dict[str, CartLine]:
        """Replace local quantities with the backend's cart; notes survive for kept lines."""
        token = self._token_getter()
        if not token:
            return self.lines
        remote = self._client_getter().cart_get(token)
        with self._lock:
            merged: Dict[str, CartLine] = {}
            for food_id, value in remote.items():
                notes = None
                if isinstance(value, dict):
                    quantity = value.get("quantity", 0)
                    notes = value.get("notes")
                else:
                    quantity = value
                try:
                    quantity = int(quantity)
                except (TypeError, ValueError):
                    logger.warning("Ignoring cart entry %s with quantity %r", food_id, value)
                    continue
                if quantity <= 0:
                    continue
                local = self._lines.get(food_id)
                if notes is None:
                    notes = local.notes if local else ""
                merged[food_id] = CartLine(food_id=food_id, quantity=quantity, notes=notes)
            self._lines = merged
        logger.debug("Cart reconciled with backend: %d lines", len(merged))
        return self.lines

    def merge_guest_cart(self) -> bool:
        """
        Push lines collected before login to the backend, then reconcile.

        Returns False when a push failed; the local cart is then left as it is.
        """
        token = self._token_getter()
        if not token:
            return False
        client = self._client_getter()
        for line in self.lines.values():
            for _ in range(line.quantity):
                try:
                    client.cart_add(token, line.food_id, line.notes or None)
                except BackendError as exc:
                    logger.warning("Could not merge guest cart line %s: %s", line.food_id, exc)
                    return False
        try:
            self.reconcile()
        except BackendError as exc:
            logger.warning("Could not reconcile cart after login: %s", exc)
            return False
        return True

    # ------------------ Queries ------------------
    @property
    def lines(self) -> Dict[str, CartLine]:
        with self._lock:
            return dict(self._lines)

    def get_quantity(self, food_id: str) -> int:
        line = self.lines.get(food_id)
        return line.quantity if line else 0

    def get_notes(self, food_id: str) -> str:
        line = self.lines.get(food_id)
        return line.notes if line else ""

    def total_items(self) -> int:
        return sum(line.quantity for line in self.lines.values())

    def is_empty(self) -> bool:
        return not self.lines

    def subtotal(self, catalog) -> float:
        """Sum of price * quantity; foods no longer on the menu count for nothing."""
        total = 0
        for food_id, line in self.lines.items():
            item = catalog.get_food(food_id)
            if item is not None:
                total += item.price * line.quantity
        return total

    def view(self, catalog) -> CartView:
        rows: List[CartLineView] = []
        for food_id, line in self.lines.items():
            item = catalog.get_food(food_id)
            if item is None:
                continue
            rows.append(
                CartLineView(
                    food_id=food_id,
                    name=item.name,
                    price=item.price,
                    image=item.image,
                    quantity=line.quantity,
                    notes=line.notes,
                    line_total=item.price * line.quantity,
                )
            )
        subtotal = sum(row.line_total for row in rows)
        fee = platform_fee_for(subtotal)
        return CartView(
            lines=rows,
            total_items=self.total_items(),
            subtotal=subtotal,
            platform_fee=fee,
            total=subtotal + fee,
            is_empty=self.is_empty(),
        )

    # ------------------ Persistence ------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            food_id: {"quantity": line.quantity, "notes": line.notes}
            for food_id, line in self.lines.items()
        }

    @staticmethod
    def lines_from_dict(data: Optional[Dict[str, Any]]) -> Dict[str, CartLine]:
        lines = {}
        for food_id, value in (data or {}).items():
            lines[food_id] = CartLine(
                food_id=food_id,
                quantity=value.get("quantity", 1),
                notes=value.get("notes", ""),
            )
        return lines

    # ------------------ Internals ------------------
    def _copy(self, food_id: str) -> Optional[CartLine]:
        line = self._lines.get(food_id)
        return line.model_copy() if line is not None else None

    def _rollback(self, food_id: str, previous: Optional[CartLine]):
        logger.warning("Rolling back optimistic change to cart line %s", food_id)
        with self._lock:
            if previous is None:
                self._lines.pop(food_id, None)
            else:
                self._lines[food_id] = previous
