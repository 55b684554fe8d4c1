"""
User and cart API schemas.
"""
import re
from datetime import datetime
from typing import List, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ..models.order import ShippingAddress
from ..models.user import USER_ROLES

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9]+$")
PASSWORD_PATTERN = re.compile(r"^(?=.*[A-Z])(?=.*[a-z])(?=.*\d).{8,}$")


class CreateUserRequest(BaseModel):
    email: EmailStr = Field(..., description="Email address, unique")
    username: str = Field(..., description="3-20 letters or digits, stored lowercased")
    password: str = Field(..., description="8+ chars with uppercase, lowercase and a digit")
    name: Optional[str] = Field(None, max_length=100)
    age: Optional[int] = Field(None, ge=0, le=120)
    role: str = Field("user")
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[ShippingAddress] = None

    @field_validator("email", mode="after")
    @classmethod
    def lowercase_email(cls, v):
        return v.lower()

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        v = v.strip().lower()
        if len(v) < 3:
            raise ValueError("Username must be at least 3 characters")
        if len(v) > 20:
            raise ValueError("Username cannot exceed 20 characters")
        if not USERNAME_PATTERN.match(v):
            raise ValueError("Username can only contain letters and numbers")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if not PASSWORD_PATTERN.match(v):
            raise ValueError("Password must be 8+ chars with uppercase, lowercase, and number")
        return v

    @field_validator("role")
    @classmethod
    def validate_role(cls, v):
        if v.lower() not in USER_ROLES:
            raise ValueError(f"Invalid role. Must be one of: {list(USER_ROLES)}")
        return v.lower()


class UpdateAddressRequest(BaseModel):
    address: ShippingAddress


class CartItemRequest(BaseModel):
    product_id: str
    quantity: int = Field(1, gt=0, le=100)

    @field_validator("product_id")
    @classmethod
    def validate_product_id(cls, v):
        if not ObjectId.is_valid(v):
            raise ValueError("Invalid product ID format")
        return str(ObjectId(v))


class UserResponse(BaseModel):
    """Public view of a user. The password hash is never part of it."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    email: str
    username: str
    name: Optional[str] = None
    age: Optional[int] = None
    role: str
    phone: Optional[str] = None
    address: Optional[ShippingAddress] = None
    orders: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: Optional[datetime] = None


class CartLineResponse(BaseModel):
    product_id: str
    name: Optional[str] = None
    price: Optional[float] = None
    quantity: int
    subtotal: float
    available: bool = Field(..., description="False when the product no longer exists")


class CartResponse(BaseModel):
    user_id: str
    items: List[CartLineResponse]
    total: float
    item_count: int
