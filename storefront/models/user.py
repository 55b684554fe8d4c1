"""
User data models for database documents.

The address is embedded; cart lines and order history reference other
collections by id.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .order import ShippingAddress

USER_ROLES = ("user", "admin", "moderator")


class CartItemDocument(BaseModel):
    product_id: str
    quantity: int = Field(..., gt=0)
    added_at: Optional[datetime] = None


class UserDocument(BaseModel):
    """User document as stored in MongoDB. ``password_hash`` is a bcrypt hash."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, alias="_id")
    email: str
    username: str
    password_hash: str
    name: Optional[str] = None
    age: Optional[int] = None
    role: str = "user"
    phone: Optional[str] = None
    address: Optional[ShippingAddress] = None
    cart: List[CartItemDocument] = Field(default_factory=list)
    orders: List[str] = Field(default_factory=list)

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
