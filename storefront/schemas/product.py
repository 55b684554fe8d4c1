"""
Catalog payloads: product create/update, rating, list filters and search hits.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.product import PRODUCT_CATEGORIES, ProductAttribute, ProductRatings

MAX_IMAGES = 10


def _check_category(v: Optional[str]) -> Optional[str]:
    if v is not None and v not in PRODUCT_CATEGORIES:
        raise ValueError(f"Invalid category. Must be one of: {list(PRODUCT_CATEGORIES)}")
    return v


def _check_images(v: Optional[List[str]]) -> Optional[List[str]]:
    if v is not None and len(v) > MAX_IMAGES:
        raise ValueError(f"Maximum {MAX_IMAGES} images allowed")
    return v


class CreateProductRequest(BaseModel):
    """Request schema for creating a new product."""
    name: str = Field(..., min_length=1, max_length=200, description="Product name")
    description: Optional[str] = Field(None, max_length=2000, description="Product description")
    price: float = Field(..., gt=0, description="Product price (must be positive)")
    category: str = Field(..., description="Product category")
    brand: Optional[str] = Field(None, min_length=1, max_length=100, description="Product brand")
    tags: List[str] = Field(default_factory=list, description="Free-form tags")
    attributes: List[ProductAttribute] = Field(default_factory=list, description="Attributes like size, color")
    stock_quantity: int = Field(0, ge=0, description="Available stock quantity")
    images: List[str] = Field(default_factory=list, description="List of image URLs")

    @field_validator("category")
    @classmethod
    def validate_category(cls, v):
        return _check_category(v)

    @field_validator("images")
    @classmethod
    def validate_images(cls, v):
        return _check_images(v)


class UpdateProductRequest(BaseModel):
    """Request schema for updating a product. Only provided fields change."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    price: Optional[float] = Field(None, gt=0)
    category: Optional[str] = None
    brand: Optional[str] = Field(None, min_length=1, max_length=100)
    tags: Optional[List[str]] = None
    attributes: Optional[List[ProductAttribute]] = None
    stock_quantity: Optional[int] = Field(None, ge=0)
    images: Optional[List[str]] = None

    @field_validator("category")
    @classmethod
    def validate_category(cls, v):
        return _check_category(v)

    @field_validator("images")
    @classmethod
    def validate_images(cls, v):
        return _check_images(v)


class RateProductRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5, description="Star rating from 1 to 5")


class ProductQueryParams(BaseModel):
    """Query parameters for product filtering and pagination."""
    name: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    size: Optional[str] = None
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, gt=0)
    in_stock: Optional[bool] = None
    tags: Optional[List[str]] = None
    limit: int = Field(10, ge=1, le=100)
    offset: int = Field(0, ge=0)


class ProductResponse(BaseModel):
    """Response schema for a single product."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Product ID")
    name: str
    description: Optional[str] = None
    price: float
    category: str
    brand: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    attributes: List[ProductAttribute] = Field(default_factory=list)
    stock_quantity: int = 0
    images: List[str] = Field(default_factory=list)
    ratings: ProductRatings = Field(default_factory=ProductRatings)
    created_at: datetime
    updated_at: Optional[datetime] = None


class ProductsListResponse(BaseModel):
    """Response schema for product list with pagination."""
    products: List[ProductResponse]
    total: int
    limit: int
    offset: int
    has_more: bool


class ProductSearchHit(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: str
    price: float
    category: str
    score: float = Field(..., description="Text relevance score")
