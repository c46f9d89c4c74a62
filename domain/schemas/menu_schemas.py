"""Pydantic schemas for menu records returned by the canteen backend."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional


class FoodItem(BaseModel):
    """A dish on the canteen menu.

    Accepts the backend's camelCase payload (``_id``, ``isSpecialToday``...)
    and exposes snake_case fields.
    """

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    name: str = Field(default="", validation_alias=AliasChoices("name", "item_name"))
    description: str = ""
    price: float = 0
    image: Optional[str] = None
    category: Optional[str] = None
    is_special_today: bool = Field(
        default=False, validation_alias=AliasChoices("isSpecialToday", "is_special_today")
    )
    discount: float = 0
    original_price: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("originalPrice", "original_price")
    )
    special_price: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("specialPrice", "special_price")
    )

    @field_validator("is_special_today", mode="before")
    @classmethod
    def parse_special_flag(cls, v):
        # the backend sends either a boolean or the string "true"
        if isinstance(v, str):
            return v.strip().lower() == "true"
        return bool(v) if v is not None else False

    @field_validator("discount", mode="before")
    @classmethod
    def default_discount(cls, v):
        return v or 0


class SpecialDish(BaseModel):
    """The dish of the day with its computed offer"""

    item: FoodItem
    original_price: float
    special_price: float
    discount: float
    savings: float


class SpecialDishResponse(BaseModel):
    special: Optional[SpecialDish] = None
    recommended: List[FoodItem] = []
