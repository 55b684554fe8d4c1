"""
Aggregation report schemas.
"""
from typing import List, Optional, Union

from pydantic import BaseModel, Field


class CategoryStats(BaseModel):
    category: str
    count: int
    avg_price: float
    min_price: float
    max_price: float
    total_stock: int


class PriceBucket(BaseModel):
    range: Union[float, str] = Field(..., description="Lower bound of the bucket, or '1000+'")
    count: int
    products: List[str]


class PriceStats(BaseModel):
    avg_price: float
    min_price: float
    max_price: float
    total_products: int


class CategoryCount(BaseModel):
    category: str
    count: int


class ExpensiveProduct(BaseModel):
    name: str
    price: float
    category: str


class CatalogOverview(BaseModel):
    by_category: List[CategoryCount]
    price_stats: Optional[PriceStats] = None
    most_expensive: List[ExpensiveProduct]


class TagCount(BaseModel):
    tag: str
    count: int


class MonthlySales(BaseModel):
    year: int
    month: int
    revenue: float
    order_count: int
    avg_order_value: float


class TopCustomer(BaseModel):
    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    total_spent: float
    order_count: int
