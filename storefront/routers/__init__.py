from . import accounts, blog, health, orders, products, reports, users

__all__ = ["accounts", "blog", "health", "orders", "products", "reports", "users"]
