"""
Product catalog operations.
"""
import logging
from typing import Any, Dict, List

from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument

from ..models.product import ProductDocument
from ..schemas.product import CreateProductRequest, ProductQueryParams, UpdateProductRequest
from ..utils.dependencies import get_document_or_404, validate_object_id
from ..utils.serializers import attributes_to_list, serialize_doc
from ..utils.text import contains_ci_regex, exact_ci_regex, utcnow

logger = logging.getLogger(__name__)


def to_product_response(product: Dict[str, Any]) -> Dict[str, Any]:
    """Stored product -> API shape (attributes as a list of pairs)."""
    data = serialize_doc(product)
    data["attributes"] = attributes_to_list(product.get("attributes"))
    return data


def build_product_filter(params: ProductQueryParams) -> Dict[str, Any]:
    """Translate list filters into a MongoDB query document."""
    filter_query: Dict[str, Any] = {}

    if params.name:
        filter_query["name"] = contains_ci_regex(params.name)

    if params.category:
        filter_query["category"] = params.category

    if params.brand:
        filter_query["brand"] = contains_ci_regex(params.brand)

    if params.size:
        filter_query["attributes.size"] = params.size

    if params.min_price is not None or params.max_price is not None:
        price_filter = {}
        if params.min_price is not None:
            price_filter["$gte"] = params.min_price
        if params.max_price is not None:
            price_filter["$lte"] = params.max_price
        filter_query["price"] = price_filter

    if params.in_stock is True:
        filter_query["stock_quantity"] = {"$gt": 0}
    elif params.in_stock is False:
        filter_query["stock_quantity"] = {"$eq": 0}

    if params.tags:
        filter_query["tags"] = {"$all": params.tags}

    return filter_query


def build_rating_update(rating: int) -> List[Dict[str, Any]]:
    """
    Update pipeline folding one rating into the running average.
    Both fields are computed from the pre-update values.
    """
    return [
        {
            "$set": {
                "ratings.average": {
                    "$divide": [
                        {"$add": [{"$multiply": ["$ratings.average", "$ratings.count"]}, rating]},
                        {"$add": ["$ratings.count", 1]},
                    ]
                },
                "ratings.count": {"$add": ["$ratings.count", 1]},
                "updated_at": utcnow(),
            }
        }
    ]


async def create_product(db: AsyncIOMotorDatabase, product: CreateProductRequest) -> Dict[str, Any]:
    existing_product = await db.products.find_one({"name": exact_ci_regex(product.name)})
    if existing_product:
        raise HTTPException(status_code=400, detail="Product with this name already exists")

    now = utcnow()
    product_doc = ProductDocument(
        name=product.name,
        description=product.description,
        price=product.price,
        category=product.category,
        brand=product.brand,
        tags=product.tags,
        attributes={attr.name: attr.value for attr in product.attributes},
        stock_quantity=product.stock_quantity,
        images=product.images,
        created_at=now,
        updated_at=now,
    ).model_dump(exclude={"id"})

    result = await db.products.insert_one(product_doc)
    created_product = await db.products.find_one({"_id": result.inserted_id})

    logger.info(f"Product created: {product.name} (ID: {result.inserted_id})")
    return to_product_response(created_product)


async def list_products(db: AsyncIOMotorDatabase, params: ProductQueryParams) -> Dict[str, Any]:
    filter_query = build_product_filter(params)

    total_count = await db.products.count_documents(filter_query)

    cursor = (
        db.products.find(filter_query)
        .sort("created_at", DESCENDING)
        .skip(params.offset)
        .limit(params.limit)
    )
    products = await cursor.to_list(length=params.limit)

    return {
        "products": [to_product_response(p) for p in products],
        "total": total_count,
        "limit": params.limit,
        "offset": params.offset,
        "has_more": params.offset + params.limit < total_count,
    }


async def search_products(db: AsyncIOMotorDatabase, query: str, limit: int = 10) -> List[Dict[str, Any]]:
    """Full-text search over name and description, best match first."""
    score = {"$meta": "textScore"}
    cursor = (
        db.products.find(
            {"$text": {"$search": query}},
            {"name": 1, "price": 1, "category": 1, "score": score},
        )
        .sort([("score", score)])
        .limit(limit)
    )
    hits = await cursor.to_list(length=limit)
    return [serialize_doc(hit) for hit in hits]


async def get_product(db: AsyncIOMotorDatabase, product_id: str) -> Dict[str, Any]:
    product = await get_document_or_404(db, "products", product_id, "product")
    return to_product_response(product)


async def update_product(
    db: AsyncIOMotorDatabase, product_id: str, product_update: UpdateProductRequest
) -> Dict[str, Any]:
    object_id = validate_object_id(product_id, "product")

    update_doc = product_update.model_dump(exclude_none=True, exclude={"attributes"})
    if product_update.attributes is not None:
        update_doc["attributes"] = {attr.name: attr.value for attr in product_update.attributes}

    if "name" in update_doc:
        clash = await db.products.find_one(
            {"name": exact_ci_regex(update_doc["name"]), "_id": {"$ne": object_id}}
        )
        if clash:
            raise HTTPException(status_code=400, detail="Product with this name already exists")

    update_doc["updated_at"] = utcnow()

    updated_product = await db.products.find_one_and_update(
        {"_id": object_id},
        {"$set": update_doc},
        return_document=ReturnDocument.AFTER,
    )
    if not updated_product:
        raise HTTPException(status_code=404, detail=f"Product {product_id} not found")

    logger.info(f"Product updated: {product_id}")
    return to_product_response(updated_product)


async def delete_product(db: AsyncIOMotorDatabase, product_id: str) -> None:
    object_id = validate_object_id(product_id, "product")

    result = await db.products.delete_one({"_id": object_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail=f"Product {product_id} not found")

    logger.info(f"Product deleted: {product_id}")


async def rate_product(db: AsyncIOMotorDatabase, product_id: str, rating: int) -> Dict[str, Any]:
    object_id = validate_object_id(product_id, "product")

    rated_product = await db.products.find_one_and_update(
        {"_id": object_id},
        build_rating_update(rating),
        return_document=ReturnDocument.AFTER,
    )
    if not rated_product:
        raise HTTPException(status_code=404, detail=f"Product {product_id} not found")

    return to_product_response(rated_product)
