"""
Domain enums for the canteen storefront.
Contains all enumeration types used across the domain models.
"""

import enum


class UserRole(str, enum.Enum):
    """Account roles known to the canteen backend"""

    CUSTOMER = "customer"
    OWNER = "owner"
    ADMIN = "admin"


class PaymentMethod(str, enum.Enum):
    """Payment choice sent with an order"""

    COD = "COD"
    ONLINE = "ONLINE"


class OrderStatus(str, enum.Enum):
    """Order states as reported by the backend (lower-cased)"""

    ORDER_PLACED = "order placed"
    PENDING = "pending"
    ACCEPTED = "accepted"
    PREPARING = "preparing"
    READY = "ready"
    OUT_FOR_DELIVERY = "out for delivery"
    DELIVERED = "delivered"


class AdminFilter(str, enum.Enum):
    """Tabs of the admin order dashboard"""

    ALL = "all"
    PENDING = "pending"
    ACCEPTED = "accepted"
    PREPARING = "preparing"
    READY = "ready"


class ChatRole(str, enum.Enum):
    """Author of a chat transcript entry"""

    USER = "user"
    ASSISTANT = "assistant"


# Progress shown on the order tracking page, in order.
TRACKING_STAGES = ["Pending", "Preparing", "Out for Delivery", "Delivered"]
