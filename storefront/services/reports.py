"""
Aggregation-pipeline reports over the catalog and the order history.

Each report has a pure ``*_pipeline`` builder and an async runner.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase

from ..db.lookups import lookup_one
from ..models.order import NON_REVENUE_STATUSES

logger = logging.getLogger(__name__)

PRICE_BOUNDARIES = (0, 50, 100, 500, 1000)
PRICE_OVERFLOW_BUCKET = "1000+"


def category_stats_pipeline() -> List[Dict[str, Any]]:
    return [
        {
            "$group": {
                "_id": "$category",
                "count": {"$sum": 1},
                "avg_price": {"$avg": "$price"},
                "min_price": {"$min": "$price"},
                "max_price": {"$max": "$price"},
                "total_stock": {"$sum": "$stock_quantity"},
            }
        },
        {"$sort": {"count": -1, "_id": 1}},
        {
            "$project": {
                "_id": 0,
                "category": "$_id",
                "count": 1,
                "avg_price": {"$round": ["$avg_price", 2]},
                "min_price": 1,
                "max_price": 1,
                "total_stock": 1,
            }
        },
    ]


def price_buckets_pipeline(boundaries: Sequence[float] = PRICE_BOUNDARIES) -> List[Dict[str, Any]]:
    """Products grouped into price ranges; anything past the last boundary lands in '1000+'."""
    return [
        {
            "$bucket": {
                "groupBy": "$price",
                "boundaries": list(boundaries),
                "default": PRICE_OVERFLOW_BUCKET,
                "output": {
                    "count": {"$sum": 1},
                    "products": {"$push": "$name"},
                },
            }
        },
        {"$project": {"_id": 0, "range": "$_id", "count": 1, "products": 1}},
    ]


def catalog_overview_pipeline(top: int = 5) -> List[Dict[str, Any]]:
    return [
        {
            "$facet": {
                "by_category": [
                    {"$group": {"_id": "$category", "count": {"$sum": 1}}},
                    {"$sort": {"count": -1, "_id": 1}},
                    {"$project": {"_id": 0, "category": "$_id", "count": 1}},
                ],
                "price_stats": [
                    {
                        "$group": {
                            "_id": None,
                            "avg_price": {"$avg": "$price"},
                            "min_price": {"$min": "$price"},
                            "max_price": {"$max": "$price"},
                            "total_products": {"$sum": 1},
                        }
                    },
                    {"$project": {"_id": 0, "avg_price": {"$round": ["$avg_price", 2]},
                                  "min_price": 1, "max_price": 1, "total_products": 1}},
                ],
                "most_expensive": [
                    {"$sort": {"price": -1}},
                    {"$limit": top},
                    {"$project": {"_id": 0, "name": 1, "price": 1, "category": 1}},
                ],
            }
        }
    ]


def tag_counts_pipeline(limit: int = 20) -> List[Dict[str, Any]]:
    return [
        {"$unwind": "$tags"},
        {"$group": {"_id": "$tags", "count": {"$sum": 1}}},
        {"$sort": {"count": -1, "_id": 1}},
        {"$limit": limit},
        {"$project": {"_id": 0, "tag": "$_id", "count": 1}},
    ]


def _revenue_match(year: Optional[int] = None) -> Dict[str, Any]:
    match: Dict[str, Any] = {"status": {"$nin": list(NON_REVENUE_STATUSES)}}
    if year is not None:
        match["created_at"] = {
            "$gte": datetime(year, 1, 1, tzinfo=timezone.utc),
            "$lt": datetime(year + 1, 1, 1, tzinfo=timezone.utc),
        }
    return match


def monthly_sales_pipeline(year: Optional[int] = None) -> List[Dict[str, Any]]:
    return [
        {"$match": _revenue_match(year)},
        {
            "$group": {
                "_id": {"year": {"$year": "$created_at"}, "month": {"$month": "$created_at"}},
                "revenue": {"$sum": "$total_amount"},
                "order_count": {"$sum": 1},
                "avg_order_value": {"$avg": "$total_amount"},
            }
        },
        {"$sort": {"_id.year": 1, "_id.month": 1}},
        {
            "$project": {
                "_id": 0,
                "year": "$_id.year",
                "month": "$_id.month",
                "revenue": {"$round": ["$revenue", 2]},
                "order_count": 1,
                "avg_order_value": {"$round": ["$avg_order_value", 2]},
            }
        },
    ]


def top_customers_pipeline(limit: int = 10) -> List[Dict[str, Any]]:
    return [
        {"$match": _revenue_match()},
        {
            "$group": {
                "_id": "$user_id",
                "total_spent": {"$sum": "$total_amount"},
                "order_count": {"$sum": 1},
            }
        },
        {"$sort": {"total_spent": -1, "_id": 1}},
        {"$limit": limit},
        *lookup_one("users", "_id", "user", {"name": 1, "email": 1}),
        {
            "$project": {
                "_id": 0,
                "user_id": "$_id",
                "name": "$user.name",
                "email": "$user.email",
                "total_spent": {"$round": ["$total_spent", 2]},
                "order_count": 1,
            }
        },
    ]


async def _aggregate(collection, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    cursor = collection.aggregate(pipeline)
    rows = await cursor.to_list(length=None)
    logger.debug(f"Report over {collection.name}: {len(pipeline)} stages, {len(rows)} rows")
    return rows


async def category_stats(db: AsyncIOMotorDatabase) -> List[Dict[str, Any]]:
    return await _aggregate(db.products, category_stats_pipeline())


async def price_buckets(db: AsyncIOMotorDatabase) -> List[Dict[str, Any]]:
    return await _aggregate(db.products, price_buckets_pipeline())


async def catalog_overview(db: AsyncIOMotorDatabase) -> Dict[str, Any]:
    results = await _aggregate(db.products, catalog_overview_pipeline())
    facets = results[0] if results else {}
    price_stats = facets.get("price_stats") or []
    return {
        "by_category": facets.get("by_category", []),
        "price_stats": price_stats[0] if price_stats else None,
        "most_expensive": facets.get("most_expensive", []),
    }


async def tag_counts(db: AsyncIOMotorDatabase, limit: int = 20) -> List[Dict[str, Any]]:
    return await _aggregate(db.products, tag_counts_pipeline(limit))


async def monthly_sales(db: AsyncIOMotorDatabase, year: Optional[int] = None) -> List[Dict[str, Any]]:
    return await _aggregate(db.orders, monthly_sales_pipeline(year))


async def top_customers(db: AsyncIOMotorDatabase, limit: int = 10) -> List[Dict[str, Any]]:
    return await _aggregate(db.orders, top_customers_pipeline(limit))
