"""API routes package"""

from . import health, menu, auth, cart, orders, admin, recommendations, chat

__all__ = ["health", "menu", "auth", "cart", "orders", "admin", "recommendations", "chat"]
