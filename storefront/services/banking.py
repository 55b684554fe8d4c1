"""
Ledger accounts with deposits, withdrawals and transfers.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorClientSession, AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..db.transactions import transaction
from ..models.account import AccountDocument
from ..schemas.account import CreateAccountRequest, TransferRequest
from ..utils.serializers import serialize_doc
from ..utils.text import utcnow

logger = logging.getLogger(__name__)


async def create_account(db: AsyncIOMotorDatabase, request: CreateAccountRequest) -> Dict[str, Any]:
    if await db.accounts.find_one({"username": request.username}, {"_id": 1}):
        raise HTTPException(status_code=409, detail=f"Account {request.username} already exists")

    now = utcnow()
    account_doc = AccountDocument(
        username=request.username,
        balance=request.balance,
        created_at=now,
        updated_at=now,
    ).model_dump(exclude={"id"})

    try:
        result = await db.accounts.insert_one(account_doc)
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail=f"Account {request.username} already exists")

    logger.info(f"Account opened: {request.username} (ID: {result.inserted_id})")
    return await get_account(db, request.username)


async def get_account(
    db: AsyncIOMotorDatabase, username: str, session: Optional[AsyncIOMotorClientSession] = None
) -> Dict[str, Any]:
    account = await db.accounts.find_one({"username": username.lower()}, session=session)
    if not account:
        raise HTTPException(status_code=404, detail=f"Account {username} not found")
    return serialize_doc(account)


async def deposit(
    db: AsyncIOMotorDatabase,
    username: str,
    amount: float,
    session: Optional[AsyncIOMotorClientSession] = None,
) -> Dict[str, Any]:
    account = await db.accounts.find_one_and_update(
        {"username": username.lower()},
        {"$inc": {"balance": amount}, "$set": {"updated_at": utcnow()}},
        return_document=ReturnDocument.AFTER,
        session=session,
    )
    if not account:
        raise HTTPException(status_code=404, detail=f"Account {username} not found")
    return serialize_doc(account)


async def withdraw(
    db: AsyncIOMotorDatabase,
    username: str,
    amount: float,
    session: Optional[AsyncIOMotorClientSession] = None,
) -> Dict[str, Any]:
    """Debit an account. The balance filter keeps it from going negative."""
    account = await db.accounts.find_one_and_update(
        {"username": username.lower(), "balance": {"$gte": amount}},
        {"$inc": {"balance": -amount}, "$set": {"updated_at": utcnow()}},
        return_document=ReturnDocument.AFTER,
        session=session,
    )
    if account:
        return serialize_doc(account)

    # Tell "missing" apart from "too poor"
    existing = await get_account(db, username, session=session)
    raise HTTPException(
        status_code=400,
        detail=f"Insufficient funds in {existing['username']}: balance {existing['balance']}, requested {amount}"
    )


async def transfer(db: AsyncIOMotorDatabase, request: TransferRequest) -> Dict[str, Any]:
    """Move money between two accounts atomically."""
    if request.from_username == request.to_username:
        raise HTTPException(status_code=400, detail="Cannot transfer to the same account")

    async with transaction(db) as session:
        source = await withdraw(db, request.from_username, request.amount, session=session)
        target = await deposit(db, request.to_username, request.amount, session=session)

    logger.info(f"Transferred {request.amount} from {request.from_username} to {request.to_username}")
    return {"from_account": source, "to_account": target, "amount": request.amount}
