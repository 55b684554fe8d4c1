"""
Multi-document transaction helper.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from motor.motor_asyncio import AsyncIOMotorClientSession, AsyncIOMotorDatabase

logger = logging.getLogger(__name__)


@asynccontextmanager
async def transaction(db: AsyncIOMotorDatabase) -> AsyncIterator[AsyncIOMotorClientSession]:
    """
    Run a block inside a MongoDB transaction.

    The transaction commits when the block exits normally and aborts when it
    raises; the exception is propagated either way. Requires a replica set
    or sharded cluster.
    """
    async with await db.client.start_session() as session:
        async with session.start_transaction():
            yield session
