"""
Schemas package for API request/response validation.
These models define the structure of data sent to and from the API endpoints.
"""

# Product schemas
from .product import (
    CreateProductRequest,
    ProductQueryParams,
    ProductResponse,
    ProductSearchHit,
    ProductsListResponse,
    RateProductRequest,
    UpdateProductRequest,
)

# Order schemas
from .order import (
    CheckoutRequest,
    CreateOrderRequest,
    OrderItemRequest,
    OrderItemResponse,
    OrderResponse,
    OrdersListResponse,
    OrderStatusHistoryResponse,
    UpdateOrderStatusRequest,
)

# User schemas
from .user import (
    CartItemRequest,
    CartLineResponse,
    CartResponse,
    CreateUserRequest,
    UpdateAddressRequest,
    UserResponse,
)

# Blog schemas
from .blog import (
    AuthorResponse,
    AuthorSummary,
    CommentResponse,
    CreateAuthorRequest,
    CreateCommentRequest,
    CreatePostRequest,
    PostResponse,
    PostSearchHit,
    PostsListResponse,
    UpdatePostRequest,
)

# Ledger schemas
from .account import AccountResponse, AmountRequest, CreateAccountRequest, TransferRequest, TransferResponse

# Report schemas
from .report import (
    CatalogOverview,
    CategoryCount,
    CategoryStats,
    ExpensiveProduct,
    MonthlySales,
    PriceBucket,
    PriceStats,
    TagCount,
    TopCustomer,
)

# Common schemas
from .common import (
    HealthCheckResponse,
    RootResponse,
    ValidationErrorDetail,
    ValidationErrorResponse,
)

__all__ = [
    # Product schemas
    "CreateProductRequest",
    "ProductQueryParams",
    "ProductResponse",
    "ProductSearchHit",
    "ProductsListResponse",
    "RateProductRequest",
    "UpdateProductRequest",

    # Order schemas
    "CheckoutRequest",
    "CreateOrderRequest",
    "OrderItemRequest",
    "OrderItemResponse",
    "OrderResponse",
    "OrdersListResponse",
    "OrderStatusHistoryResponse",
    "UpdateOrderStatusRequest",

    # User schemas
    "CartItemRequest",
    "CartLineResponse",
    "CartResponse",
    "CreateUserRequest",
    "UpdateAddressRequest",
    "UserResponse",

    # Blog schemas
    "AuthorResponse",
    "AuthorSummary",
    "CommentResponse",
    "CreateAuthorRequest",
    "CreateCommentRequest",
    "CreatePostRequest",
    "PostResponse",
    "PostSearchHit",
    "PostsListResponse",
    "UpdatePostRequest",

    # Ledger schemas
    "AccountResponse",
    "AmountRequest",
    "CreateAccountRequest",
    "TransferRequest",
    "TransferResponse",

    # Report schemas
    "CatalogOverview",
    "CategoryCount",
    "CategoryStats",
    "ExpensiveProduct",
    "MonthlySales",
    "PriceBucket",
    "PriceStats",
    "TagCount",
    "TopCustomer",

    # Common schemas
    "HealthCheckResponse",
    "RootResponse",
    "ValidationErrorDetail",
    "ValidationErrorResponse",
]
