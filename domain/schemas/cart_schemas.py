from pydantic import BaseModel, Field
from typing import List, Optional


class CartLine(BaseModel):
    """One cart entry keyed by food id"""

    food_id: str
    quantity: int = Field(..., ge=1)
    notes: str = ""


class CartLineView(BaseModel):
    """Cart entry joined with its menu record"""

    food_id: str
    name: str
    price: float
    image: Optional[str] = None
    quantity: int
    notes: str = ""
    line_total: float


class CartView(BaseModel):
    """Cart as displayed on the cart page"""

    lines: List[CartLineView]
    total_items: int
    subtotal: float
    platform_fee: float
    total: float
    is_empty: bool


class AddToCartRequest(BaseModel):
    notes: Optional[str] = Field(
        None, max_length=500, description="Special instructions; keeps existing notes when omitted"
    )


class CartNotesUpdate(BaseModel):
    notes: str = Field("", max_length=500)
