"""
Product data models for database documents.
These represent the actual structure of documents stored in MongoDB.
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

PRODUCT_CATEGORIES = ("Electronics", "Clothing", "Food", "Books", "Home", "Other")


class ProductAttribute(BaseModel):
    """Product attribute model for key-value pairs."""
    name: str = Field(..., min_length=1, description="Attribute name")
    value: str = Field(..., min_length=1, description="Attribute value")


class ProductRatings(BaseModel):
    """Running rating aggregate kept on the product."""
    average: float = Field(default=0, ge=0, le=5)
    count: int = Field(default=0, ge=0)


class ProductDocument(BaseModel):
    """
    Product document model representing the MongoDB document structure.
    Attributes are stored as a name -> value mapping so that
    ``attributes.size`` style filters work.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, alias="_id", description="Product ID")
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    price: float = Field(..., gt=0)
    category: str = Field(...)
    brand: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    attributes: Dict[str, str] = Field(default_factory=dict)
    stock_quantity: int = Field(default=0, ge=0)
    images: List[str] = Field(default_factory=list)
    ratings: ProductRatings = Field(default_factory=ProductRatings)

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
