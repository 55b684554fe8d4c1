"""
Storefront: shop, blog and ledger HTTP API on MongoDB.
"""
__version__ = "1.0.0"
