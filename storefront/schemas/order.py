"""
Order placement, checkout and status-change payloads.
"""
from datetime import datetime
from typing import List, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.order import ORDER_STATUSES, PAYMENT_METHODS, ShippingAddress


def _check_payment_method(v: str) -> str:
    if v.lower() not in PAYMENT_METHODS:
        raise ValueError(f"Invalid payment method. Must be one of: {list(PAYMENT_METHODS)}")
    return v.lower()


class OrderItemRequest(BaseModel):
    product_id: str
    quantity: int = Field(..., gt=0, le=100)

    @field_validator("product_id")
    @classmethod
    def validate_product_id(cls, v):
        if not ObjectId.is_valid(v):
            raise ValueError("Invalid product ID format")
        return str(ObjectId(v))


class CreateOrderRequest(BaseModel):
    """Order built from an explicit item list; repeated products are merged."""
    user_id: str = Field(..., min_length=1)
    items: List[OrderItemRequest] = Field(..., min_length=1, max_length=50)
    shipping_address: Optional[ShippingAddress] = None
    payment_method: str = Field("cod", description="One of credit_card, debit_card, paypal, upi, cod")

    @field_validator("payment_method")
    @classmethod
    def validate_payment_method(cls, v):
        return _check_payment_method(v)


class CheckoutRequest(BaseModel):
    """Turn the user's cart into an order. The address defaults to the user's own."""
    shipping_address: Optional[ShippingAddress] = None
    payment_method: str = "cod"

    @field_validator("payment_method")
    @classmethod
    def validate_payment_method(cls, v):
        return _check_payment_method(v)


class UpdateOrderStatusRequest(BaseModel):
    status: str
    reason: Optional[str] = Field(None, max_length=500, description="Stored on the status history entry")

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v.lower() not in ORDER_STATUSES:
            raise ValueError(f"Invalid status. Must be one of: {list(ORDER_STATUSES)}")
        return v.lower()


class OrderItemResponse(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    price_per_item: float
    total_price: float


class OrderStatusHistoryResponse(BaseModel):
    status: str
    timestamp: datetime
    reason: Optional[str] = None


class OrderResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    user_id: str
    items: List[OrderItemResponse]
    total_amount: float
    status: str
    status_history: List[OrderStatusHistoryResponse] = Field(default_factory=list)
    shipping_address: Optional[ShippingAddress] = None
    payment_method: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class OrdersListResponse(BaseModel):
    orders: List[OrderResponse]
    total: int
    limit: int
    offset: int
    user_id: Optional[str] = None
    has_more: bool
