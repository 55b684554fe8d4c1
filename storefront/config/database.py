"""
MongoDB connection lifecycle.

One ``DatabaseManager`` per process owns the Motor client. Startup connects,
then prepares the collections (indexes and, optionally, $jsonSchema
validators). A failed connection leaves the app up with only the
database-free endpoints working.
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from ..db.indexes import create_indexes
from ..db.validators import apply_validators
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


def client_options(settings: Settings) -> Dict[str, Any]:
    """Keyword arguments for AsyncIOMotorClient."""
    return {
        "serverSelectionTimeoutMS": settings.server_selection_timeout_ms,
        "connectTimeoutMS": settings.connect_timeout_ms,
        "socketTimeoutMS": settings.socket_timeout_ms,
        "maxPoolSize": settings.max_pool_size,
        "minPoolSize": settings.min_pool_size,
        "retryWrites": settings.retry_writes,
        "directConnection": settings.direct_connection,
        "tz_aware": True,
    }


class DatabaseManager:
    """Holds the Motor client and the storefront database handle."""

    def __init__(self):
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None

    async def connect(self, settings: Optional[Settings] = None) -> bool:
        """Open the client and ping the server. Returns whether it worked."""
        settings = settings or get_settings()
        logger.info("🚀 Connecting to MongoDB...")

        client = AsyncIOMotorClient(settings.mongodb_url, **client_options(settings))
        try:
            await client.admin.command("ping")
        except Exception as db_error:
            client.close()
            logger.warning(f"⚠️  MongoDB connection failed: {db_error}")
            return False

        self.client = client
        self.database = client[settings.database_name]
        logger.info(f"✅ Connected to MongoDB database '{settings.database_name}'")
        return True

    async def prepare(self, with_validators: bool = True) -> None:
        """Ensure indexes and collection validators. Failures only warn."""
        if self.database is None:
            logger.warning("Database not connected, skipping collection setup")
            return

        try:
            names = await create_indexes(self.database)
            logger.info(f"✅ {len(names)} indexes ensured")
        except Exception as index_error:
            logger.warning(f"⚠️  Failed to create indexes: {index_error}")

        if with_validators:
            applied = await apply_validators(self.database)
            logger.info(f"✅ Collection validators applied: {', '.join(applied) or 'none'}")

    async def ping(self) -> str:
        """Connection status for the health endpoint."""
        if self.database is None:
            return "disconnected"
        try:
            await self.database.command("ping")
        except Exception as e:
            return f"error: {e}"
        return "connected"

    async def disconnect(self) -> None:
        if self.client is not None:
            self.client.close()
            logger.info("🔌 MongoDB connection closed")
        self.client = None
        self.database = None

    def get_database(self) -> AsyncIOMotorDatabase:
        if self.database is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self.database

    def is_connected(self) -> bool:
        return self.database is not None


db_manager = DatabaseManager()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect and prepare collections on startup, close the client on shutdown."""
    settings = get_settings()
    logger.info(f"🚀 Starting {settings.app_name} v{settings.app_version}")

    try:
        if await db_manager.connect(settings):
            await db_manager.prepare(with_validators=settings.apply_collection_validators)
    except Exception as e:
        logger.error(f"❌ Database setup failed: {e}")
    app.state.db_manager = db_manager

    yield

    await db_manager.disconnect()


async def get_database() -> AsyncIOMotorDatabase:
    """Request dependency: the database handle, or 503 while disconnected."""
    if not db_manager.is_connected():
        raise HTTPException(
            status_code=503,
            detail="Database connection not available. Please check your MongoDB connection."
        )
    return db_manager.get_database()


def get_database_manager() -> DatabaseManager:
    return db_manager
