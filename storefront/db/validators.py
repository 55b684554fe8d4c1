"""
Server-side $jsonSchema validators.

These back up the pydantic request validation so that documents written
by other clients obey the same basic shape.
"""
import logging
from typing import Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import OperationFailure

from ..models.product import PRODUCT_CATEGORIES

logger = logging.getLogger(__name__)

NAMESPACE_NOT_FOUND = 26

PRODUCT_SCHEMA: Dict[str, Any] = {
    "$jsonSchema": {
        "bsonType": "object",
        "required": ["name", "price", "category"],
        "properties": {
            "name": {
                "bsonType": "string",
                "description": "must be a string and is required",
            },
            "price": {
                "bsonType": "number",
                "minimum": 0,
                "description": "must be a positive number",
            },
            "category": {
                "enum": list(PRODUCT_CATEGORIES),
                "description": "must be one of the enum values",
            },
            "tags": {
                "bsonType": "array",
                "items": {"bsonType": "string"},
            },
        },
    }
}

ACCOUNT_SCHEMA: Dict[str, Any] = {
    "$jsonSchema": {
        "bsonType": "object",
        "required": ["username", "balance"],
        "properties": {
            "username": {"bsonType": "string"},
            "balance": {
                "bsonType": "number",
                "minimum": 0,
                "description": "balance can never go negative",
            },
        },
    }
}

COLLECTION_VALIDATORS: Dict[str, Dict[str, Any]] = {
    "products": PRODUCT_SCHEMA,
    "accounts": ACCOUNT_SCHEMA,
}


async def apply_validator(db: AsyncIOMotorDatabase, collection: str, validator: Dict[str, Any]) -> None:
    """Attach a validator to an existing collection, creating it when missing."""
    try:
        await db.command("collMod", collection, validator=validator)
    except OperationFailure as e:
        if e.code != NAMESPACE_NOT_FOUND:
            raise
        await db.create_collection(collection, validator=validator)


async def apply_validators(db: AsyncIOMotorDatabase) -> List[str]:
    """Apply every known validator; failures are logged and skipped."""
    applied = []
    for collection, validator in COLLECTION_VALIDATORS.items():
        try:
            await apply_validator(db, collection, validator)
            applied.append(collection)
        except Exception as e:
            logger.warning(f"⚠️  Failed to apply validator on {collection}: {e}")
    return applied
