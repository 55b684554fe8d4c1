"""
Lookups and argument checks shared by the services.

Everything here raises ``HTTPException`` so callers can let it propagate
straight out of a route.
"""
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorClientSession, AsyncIOMotorDatabase

from ..config.settings import get_settings


def validate_object_id(object_id: str, resource_name: str = "resource") -> ObjectId:
    """Parse a path or body id, 400 when it is not a 24-hex ObjectId."""
    if ObjectId.is_valid(object_id):
        return ObjectId(object_id)
    raise HTTPException(status_code=400, detail=f"Invalid {resource_name} ID format: {object_id}")


async def get_document_or_404(
    db: AsyncIOMotorDatabase,
    collection: str,
    document_id: str,
    resource_name: str,
    projection: Optional[Dict[str, Any]] = None,
    session: Optional[AsyncIOMotorClientSession] = None,
) -> Dict[str, Any]:
    """
    Load ``collection[document_id]``.

    Raises:
        HTTPException: 400 for a malformed id, 404 when the document is missing
    """
    object_id = validate_object_id(document_id, resource_name)
    document = await db[collection].find_one({"_id": object_id}, projection, session=session)
    if document is None:
        raise HTTPException(status_code=404, detail=f"{resource_name.capitalize()} {document_id} not found")
    return document


async def verify_product_exists(product_id: str, db: AsyncIOMotorDatabase) -> Dict[str, Any]:
    return await get_document_or_404(db, "products", product_id, "product")


async def verify_products_exist(
    product_ids: List[str],
    db: AsyncIOMotorDatabase,
    session: Optional[AsyncIOMotorClientSession] = None,
) -> Dict[str, Dict[str, Any]]:
    """
    Load several products with one ``$in`` query.

    Returns a mapping of product id string to document. Any id that is
    malformed (400) or unknown (404) fails the whole call; unknown ids are
    listed sorted in the error detail.
    """
    wanted = [validate_object_id(product_id, "product") for product_id in product_ids]
    # Compare in canonical lowercase form; ObjectId accepts either case
    wanted_ids = {str(oid) for oid in wanted}

    cursor = db.products.find({"_id": {"$in": wanted}}, session=session)
    products = {str(doc["_id"]): doc for doc in await cursor.to_list(length=None)}

    missing = sorted(wanted_ids - products.keys())
    if missing:
        raise HTTPException(status_code=404, detail=f"Products not found: {', '.join(missing)}")
    return products


def validate_pagination_params(limit: int, offset: int) -> Tuple[int, int]:
    """400 unless 1 <= limit <= MAX_PAGE_SIZE and offset >= 0."""
    max_page_size = get_settings().max_page_size
    if not 1 <= limit <= max_page_size:
        raise HTTPException(status_code=400, detail=f"Limit must be between 1 and {max_page_size}")
    if offset < 0:
        raise HTTPException(status_code=400, detail="Offset must be non-negative")
    return limit, offset
