"""
Stored order shape. Line items snapshot the product so later price or
name changes never rewrite history.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

ORDER_STATUSES = ("pending", "confirmed", "processing", "shipped", "delivered", "cancelled", "refunded")

# An order in one of these states can no longer change status
FINAL_STATUSES = ("cancelled", "refunded")

# Orders in these states do not count towards sales reports
NON_REVENUE_STATUSES = ("cancelled", "refunded")

PAYMENT_METHODS = ("credit_card", "debit_card", "paypal", "upi", "cod")


class OrderItemDocument(BaseModel):
    """Order line with the product name and price captured at order time."""
    product_id: str
    product_name: str
    quantity: int = Field(..., gt=0)
    price_per_item: float = Field(..., gt=0)
    total_price: float = Field(..., ge=0)


class ShippingAddress(BaseModel):
    """Embedded address, used both on orders and on the user profile."""
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = None
    phone: Optional[str] = None


class OrderStatusHistory(BaseModel):
    """One entry per status change, appended with $push."""
    status: str
    timestamp: datetime
    reason: Optional[str] = None


class OrderDocument(BaseModel):
    """`user_id` and `items[].product_id` are string references."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, alias="_id")
    user_id: str = Field(..., min_length=1)
    items: List[OrderItemDocument] = Field(..., min_length=1)
    total_amount: float = Field(..., ge=0)
    status: str = Field(default="pending")
    status_history: List[OrderStatusHistory] = Field(default_factory=list)
    shipping_address: Optional[ShippingAddress] = None
    payment_method: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
