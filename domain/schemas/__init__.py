"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.menu_schemas import FoodItem, SpecialDish, SpecialDishResponse
from domain.schemas.cart_schemas import (
    CartLine,
    CartLineView,
    CartView,
    AddToCartRequest,
    CartNotesUpdate,
)
from domain.schemas.auth_schemas import (
    SignupRequest,
    LoginRequest,
    StorefrontUser,
    SessionInfo,
)
from domain.schemas.order_schemas import (
    DeliveryDetails,
    PlaceOrderRequest,
    OrderItem,
    Order,
    LoyaltyStatus,
    CheckoutSummary,
    PlacedOrder,
    MyOrderView,
    MyOrdersResponse,
    TrackingView,
    AdminOrderCard,
    AdminDashboard,
)
from domain.schemas.recommendation_schemas import (
    Result,
    Recommendation,
    RecommendedItem,
    RecommendationsResponse,
)
from domain.schemas.chat_schemas import ChatMessage, ChatSendRequest, ChatTranscript

__all__ = [
    # Menu schemas
    "FoodItem",
    "SpecialDish",
    "SpecialDishResponse",
    # Cart schemas
    "CartLine",
    "CartLineView",
    "CartView",
    "AddToCartRequest",
    "CartNotesUpdate",
    # Auth schemas
    "SignupRequest",
    "LoginRequest",
    "StorefrontUser",
    "SessionInfo",
    # Order schemas
    "DeliveryDetails",
    "PlaceOrderRequest",
    "OrderItem",
    "Order",
    "LoyaltyStatus",
    "CheckoutSummary",
    "PlacedOrder",
    "MyOrderView",
    "MyOrdersResponse",
    "TrackingView",
    "AdminOrderCard",
    "AdminDashboard",
    # Recommendation schemas
    "Result",
    "Recommendation",
    "RecommendedItem",
    "RecommendationsResponse",
    # Chat schemas
    "ChatMessage",
    "ChatSendRequest",
    "ChatTranscript",
]
