from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import Optional

from domain.enums import UserRole


class SignupRequest(BaseModel):
    """Registration form"""

    username: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)
    role: UserRole = UserRole.CUSTOMER

    @field_validator("role")
    @classmethod
    def self_service_roles(cls, v: UserRole) -> UserRole:
        if v == UserRole.ADMIN:
            raise ValueError("role must be customer or owner")
        return v

    @field_validator("email")
    @classmethod
    def email_shape(cls, v: str) -> str:
        v = v.strip()
        if "@" not in v:
            raise ValueError("invalid email address")
        return v


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class StorefrontUser(BaseModel):
    """User record returned by the backend at login"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    username: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("username", "name")
    )
    email: Optional[str] = None
    role: str = Field(
        default=UserRole.CUSTOMER.value, validation_alias=AliasChoices("role", "userType")
    )

    @property
    def is_admin(self) -> bool:
        return (self.role or "").lower() == UserRole.ADMIN.value


class SessionInfo(BaseModel):
    """What the storefront knows about the current visitor"""

    session_id: str
    logged_in: bool
    user: Optional[StorefrontUser] = None
    is_admin: bool = False
