"""
Models package for database document structures.
These models represent how data is stored in MongoDB.
"""
from .product import PRODUCT_CATEGORIES, ProductAttribute, ProductDocument, ProductRatings
from .order import (
    FINAL_STATUSES,
    NON_REVENUE_STATUSES,
    ORDER_STATUSES,
    PAYMENT_METHODS,
    OrderDocument,
    OrderItemDocument,
    OrderStatusHistory,
    ShippingAddress,
)
from .user import USER_ROLES, CartItemDocument, UserDocument
from .blog import AuthorDocument, CommentDocument, PostDocument
from .account import AccountDocument

__all__ = [
    # Product models
    "PRODUCT_CATEGORIES",
    "ProductAttribute",
    "ProductDocument",
    "ProductRatings",

    # Order models
    "FINAL_STATUSES",
    "NON_REVENUE_STATUSES",
    "ORDER_STATUSES",
    "PAYMENT_METHODS",
    "OrderDocument",
    "OrderItemDocument",
    "OrderStatusHistory",
    "ShippingAddress",

    # User models
    "USER_ROLES",
    "CartItemDocument",
    "UserDocument",

    # Blog models
    "AuthorDocument",
    "CommentDocument",
    "PostDocument",

    # Ledger
    "AccountDocument",
]
