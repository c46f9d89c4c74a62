"""Schemas for the recommendation widgets."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Any, Generic, List, Optional, TypeVar

T = TypeVar("T")


class Result(BaseModel, Generic[T]):
    """Outcome of a call to an optional remote service.

    Widgets degrade instead of failing the page, so these calls return a
    result object rather than raising.
    """

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Any) -> "Result":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "Result":
        return cls(success=False, error=error)


class Recommendation(BaseModel):
    """Item suggested by the recommendation service"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    item_name: str = Field(default="", validation_alias=AliasChoices("item_name", "name"))
    order_count: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("order_count", "count")
    )


class RecommendedItem(BaseModel):
    """Recommendation joined with the menu"""

    item_name: str
    order_count: Optional[int] = None
    food_id: Optional[str] = None
    price: Optional[float] = None
    available: bool = False


class RecommendationsResponse(BaseModel):
    items: List[RecommendedItem] = []
    error: Optional[str] = None
