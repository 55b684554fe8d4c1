"""
Index plan for every collection the service owns.
"""
import logging
from typing import Any, Dict, List, Tuple, Union

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, TEXT

logger = logging.getLogger(__name__)

IndexKeys = Union[str, List[Tuple[str, Any]]]

# (collection, keys, options)
INDEX_PLAN: List[Tuple[str, IndexKeys, Dict[str, Any]]] = [
    # Products
    ("products", "name", {}),
    ("products", "category", {}),
    ("products", "created_at", {}),
    ("products", [("category", ASCENDING), ("price", DESCENDING)], {}),
    ("products", [("name", TEXT), ("description", TEXT)], {"name": "products_text"}),

    # Orders
    ("orders", "user_id", {}),
    ("orders", "status", {}),
    ("orders", "created_at", {}),
    ("orders", [("user_id", ASCENDING), ("created_at", DESCENDING)], {}),

    # Users
    ("users", "email", {"unique": True}),
    ("users", "username", {"unique": True}),
    ("users", "phone", {"sparse": True}),

    # Blog
    ("authors", "email", {"unique": True}),
    ("posts", "slug", {"unique": True}),
    ("posts", "author_id", {}),
    ("posts", [("published", ASCENDING), ("created_at", DESCENDING)], {}),
    ("posts", [("title", TEXT), ("content", TEXT), ("tags", TEXT)], {"name": "posts_text"}),

    # Ledger
    ("accounts", "username", {"unique": True}),
]


async def create_indexes(db: AsyncIOMotorDatabase) -> List[str]:
    """Create every index in INDEX_PLAN. Returns the created index names."""
    created = []
    for collection, keys, options in INDEX_PLAN:
        name = await db[collection].create_index(keys, **options)
        logger.debug(f"Index ensured on {collection}: {name}")
        created.append(name)
    return created
