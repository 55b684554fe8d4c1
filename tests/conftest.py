# Test configuration
import os

# Set test environment variables BEFORE importing app modules
os.environ["MONGODB_URL"] = "mongodb://localhost:27017"
os.environ["DATABASE_NAME"] = "storefront_test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["BCRYPT_ROUNDS"] = "4"  # Lower rounds for faster tests
os.environ["APPLY_COLLECTION_VALIDATORS"] = "false"

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from storefront.config.database import get_database
from storefront.main import app


def make_cursor(docs):
    """Motor-style cursor: chainable sort/skip/limit and an async to_list."""
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.skip.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs)
    return cursor


def make_collection():
    collection = MagicMock()
    for method in (
        "find_one",
        "insert_one",
        "update_one",
        "delete_one",
        "find_one_and_update",
        "count_documents",
        "create_index",
    ):
        setattr(collection, method, AsyncMock())
    collection.find.return_value = make_cursor([])
    collection.aggregate.return_value = make_cursor([])
    return collection


class FakeTransaction:
    def __init__(self, session):
        self.session = session

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.session.committed = True
        else:
            self.session.aborted = True
        return False


class FakeSession:
    def __init__(self):
        self.committed = False
        self.aborted = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    def start_transaction(self):
        return FakeTransaction(self)


class FakeDatabase:
    """Stands in for AsyncIOMotorDatabase: one mock collection per name."""

    def __init__(self):
        self.collections = {}
        self.session = FakeSession()
        self.client = MagicMock()
        self.client.start_session = AsyncMock(return_value=self.session)
        self.command = AsyncMock()
        self.create_collection = AsyncMock()

    def __getitem__(self, name):
        if name not in self.collections:
            self.collections[name] = make_collection()
        return self.collections[name]

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]


@pytest.fixture
def mock_db():
    return FakeDatabase()


@pytest.fixture
def client(mock_db):
    """TestClient whose routes talk to the fake database."""
    app.dependency_overrides[get_database] = lambda: mock_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def now():
    return datetime(2024, 5, 17, 12, 0, 0)


@pytest.fixture
def product_doc(now):
    return {
        "_id": ObjectId(),
        "name": "Trail Runner",
        "description": "Lightweight running shoe",
        "price": 120.0,
        "category": "Clothing",
        "brand": "Stride",
        "tags": ["shoes", "running"],
        "attributes": {"size": "42", "color": "blue"},
        "stock_quantity": 5,
        "images": [],
        "ratings": {"average": 0, "count": 0},
        "created_at": now,
        "updated_at": now,
    }


@pytest.fixture
def user_doc(now):
    return {
        "_id": ObjectId(),
        "email": "sam@example.com",
        "username": "sam",
        "name": "Sam",
        "role": "user",
        "address": {"street": "1 Main St", "city": "Springfield"},
        "orders": [],
        "created_at": now,
        "updated_at": now,
    }
