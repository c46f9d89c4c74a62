from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from typing import Any, List, Optional
from datetime import datetime

from domain.enums import PaymentMethod


class DeliveryDetails(BaseModel):
    """Delivery form of the checkout page. Blank fields are rejected by the order service."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    phone: str = ""
    hostel: str = ""
    room_no: str = Field(default="", validation_alias=AliasChoices("roomNo", "room_no"))

    @field_validator("name", "phone", "hostel", "room_no", mode="before")
    @classmethod
    def strip_blank(cls, v):
        return (v or "").strip() if isinstance(v, str) or v is None else str(v)

    def is_complete(self) -> bool:
        return all([self.name, self.phone, self.hostel, self.room_no])

    def to_backend(self) -> dict:
        return {
            "name": self.name,
            "phone": self.phone,
            "hostel": self.hostel,
            "roomNo": self.room_no,
        }


class PlaceOrderRequest(BaseModel):
    delivery_details: DeliveryDetails
    payment_method: PaymentMethod = PaymentMethod.COD


class OrderItem(BaseModel):
    """Line of an order; the backend may embed the food document in ``foodId``"""

    name: str = ""
    quantity: int = 0
    food_id: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def flatten_food_ref(cls, data: Any):
        if not isinstance(data, dict):
            return data
        food_ref = data.get("foodId")
        name = data.get("name")
        food_id = data.get("food_id")
        if isinstance(food_ref, dict):
            name = name or food_ref.get("name")
            food_id = food_id or food_ref.get("_id")
        elif food_ref is not None:
            food_id = food_id or str(food_ref)
        return {
            "name": name or "",
            "quantity": data.get("quantity", 0),
            "food_id": food_id,
        }


class Order(BaseModel):
    """Order record as returned by the backend"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    items: List[OrderItem] = []
    amount: Optional[float] = None
    total_amount: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("totalAmount", "total_amount")
    )
    status: Optional[str] = None
    created_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("createdAt", "created_at", "date")
    )
    delivery_details: Optional[DeliveryDetails] = Field(
        default=None, validation_alias=AliasChoices("deliveryDetails", "delivery_details")
    )
    payment_method: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("paymentMethod", "payment_method")
    )

    @property
    def display_amount(self) -> Optional[float]:
        return self.total_amount if self.total_amount is not None else self.amount

    @property
    def short_ref(self) -> str:
        return self.id[-6:]

    @property
    def items_summary(self) -> str:
        return ", ".join(f"{item.name} × {item.quantity}" for item in self.items)


class LoyaltyStatus(BaseModel):
    """Progress in the 'Foodie Rewards' cycle"""

    order_count: int
    cycle: int
    progress: int
    orders_until_free: int
    reward_earned: bool
    next_order_is_reward: bool
    progress_percent: float


class CheckoutSummary(BaseModel):
    subtotal: float
    platform_fee: float
    total: float
    total_items: int
    loyalty: Optional[LoyaltyStatus] = None
    loyalty_notice: Optional[str] = None


class PlacedOrder(BaseModel):
    order_id: Optional[str] = None
    subtotal: float
    platform_fee: float
    total: float
    message: str


class MyOrderView(BaseModel):
    id: str
    items_summary: str
    item_count: int
    amount: Optional[float]
    status: Optional[str]


class MyOrdersResponse(BaseModel):
    orders: List[MyOrderView]
    loyalty: LoyaltyStatus


class TrackingView(BaseModel):
    order_id: str
    status: Optional[str]
    total_amount: Optional[float]
    stages: List[str]
    current_stage_index: int
    items: List[OrderItem]
    refresh_seconds: int


class AdminOrderCard(BaseModel):
    id: str
    short_ref: str
    status: str
    amount: Optional[float]
    created_at: Optional[datetime]
    items: List[OrderItem]
    next_action: Optional[str] = None
    ready_for_pickup: bool = False


class AdminDashboard(BaseModel):
    filter: str
    counts: dict[str, int]
    orders: List[AdminOrderCard]
    refresh_seconds: int
