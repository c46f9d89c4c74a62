"""Services package - Storefront state and rules"""

from services.menu_service import MenuCatalog, catalog
from services.cart_service import CartStore
from services.chat_service import ChatSession
from services.session_service import SessionService, StorefrontState
from services.auth_service import AuthService
from services.order_service import OrderService
from services.admin_service import AdminService
from services.recommendation_service import RecommendationService

# Note: loyalty contains utility functions, not a class

__all__ = [
    "MenuCatalog",
    "catalog",
    "CartStore",
    "ChatSession",
    "SessionService",
    "StorefrontState",
    "AuthService",
    "OrderService",
    "AdminService",
    "RecommendationService",
]
