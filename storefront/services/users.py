"""
User accounts and shopping carts.
"""
import logging
from typing import Any, Dict, List

from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..db.lookups import lookup_one
from ..models.user import UserDocument
from ..schemas.user import CartItemRequest, CreateUserRequest, UpdateAddressRequest
from ..utils.dependencies import get_document_or_404, validate_object_id, verify_product_exists
from ..utils.security import hash_password
from ..utils.serializers import serialize_doc
from ..utils.text import utcnow

logger = logging.getLogger(__name__)

PUBLIC_PROJECTION = {"password_hash": 0, "cart": 0}


async def register_user(db: AsyncIOMotorDatabase, request: CreateUserRequest) -> Dict[str, Any]:
    existing = await db.users.find_one(
        {"$or": [{"email": request.email}, {"username": request.username}]},
        {"email": 1, "username": 1},
    )
    if existing:
        field = "email" if existing.get("email") == request.email else "username"
        raise HTTPException(status_code=409, detail=f"A user with this {field} already exists")

    now = utcnow()
    user_doc = UserDocument(
        email=request.email,
        username=request.username,
        password_hash=hash_password(request.password),
        name=request.name,
        age=request.age,
        role=request.role,
        phone=request.phone,
        address=request.address,
        created_at=now,
        updated_at=now,
    ).model_dump(exclude={"id"})
    if user_doc["phone"] is None:
        # Sparse index: leave the field out rather than storing null
        del user_doc["phone"]

    try:
        result = await db.users.insert_one(user_doc)
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail="A user with this email or username already exists")

    logger.info(f"User registered: {request.username} (ID: {result.inserted_id})")
    return await get_user(db, str(result.inserted_id))


async def get_user(db: AsyncIOMotorDatabase, user_id: str) -> Dict[str, Any]:
    user = await get_document_or_404(db, "users", user_id, "user", projection=PUBLIC_PROJECTION)
    return serialize_doc(user)


async def update_address(db: AsyncIOMotorDatabase, user_id: str, request: UpdateAddressRequest) -> Dict[str, Any]:
    object_id = validate_object_id(user_id, "user")

    user = await db.users.find_one_and_update(
        {"_id": object_id},
        {"$set": {"address": request.address.model_dump(), "updated_at": utcnow()}},
        projection=PUBLIC_PROJECTION,
        return_document=ReturnDocument.AFTER,
    )
    if not user:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    return serialize_doc(user)


async def add_to_cart(db: AsyncIOMotorDatabase, user_id: str, item: CartItemRequest) -> Dict[str, Any]:
    """Add a product to the cart, merging with an existing line for it."""
    object_id = validate_object_id(user_id, "user")
    await verify_product_exists(item.product_id, db)

    now = utcnow()
    result = await db.users.update_one(
        {"_id": object_id, "cart.product_id": item.product_id},
        {"$inc": {"cart.$.quantity": item.quantity}, "$set": {"updated_at": now}},
    )
    if result.matched_count == 0:
        result = await db.users.update_one(
            {"_id": object_id},
            {
                "$push": {"cart": {"product_id": item.product_id, "quantity": item.quantity, "added_at": now}},
                "$set": {"updated_at": now},
            },
        )
        if result.matched_count == 0:
            raise HTTPException(status_code=404, detail=f"User {user_id} not found")

    return await get_cart(db, user_id)


async def remove_from_cart(db: AsyncIOMotorDatabase, user_id: str, product_id: str) -> Dict[str, Any]:
    object_id = validate_object_id(user_id, "user")
    product_id = str(validate_object_id(product_id, "product"))

    result = await db.users.update_one(
        {"_id": object_id},
        {"$pull": {"cart": {"product_id": product_id}}, "$set": {"updated_at": utcnow()}},
    )
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")

    return await get_cart(db, user_id)


def build_cart_pipeline(user_object_id) -> List[Dict[str, Any]]:
    return [
        {"$match": {"_id": user_object_id}},
        {"$unwind": "$cart"},
        *lookup_one("products", "cart.product_id", "product", {"name": 1, "price": 1}),
        {
            "$project": {
                "_id": 0,
                "product_id": "$cart.product_id",
                "quantity": "$cart.quantity",
                "name": "$product.name",
                "price": "$product.price",
            }
        },
    ]


def summarize_cart(user_id: str, lines: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Price the joined cart lines. Lines whose product vanished count as zero."""
    items = []
    total = 0.0
    for line in lines:
        price = line.get("price")
        available = price is not None
        subtotal = round(price * line["quantity"], 2) if available else 0.0
        total += subtotal
        items.append({
            "product_id": line["product_id"],
            "name": line.get("name"),
            "price": price,
            "quantity": line["quantity"],
            "subtotal": subtotal,
            "available": available,
        })

    return {
        "user_id": user_id,
        "items": items,
        "total": round(total, 2),
        "item_count": sum(item["quantity"] for item in items),
    }


async def get_cart(db: AsyncIOMotorDatabase, user_id: str) -> Dict[str, Any]:
    user = await get_document_or_404(db, "users", user_id, "user", projection={"_id": 1})

    cursor = db.users.aggregate(build_cart_pipeline(user["_id"]))
    lines = await cursor.to_list(length=None)
    return summarize_cart(user_id, lines)
