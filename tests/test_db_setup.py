"""
Tests for index creation, collection validators, transactions and the
connection manager.
"""
from unittest.mock import AsyncMock

import pytest
from fastapi import HTTPException
from pymongo import TEXT
from pymongo.errors import OperationFailure

from storefront.config.database import DatabaseManager, get_database
from storefront.db import indexes, validators
from storefront.db.indexes import INDEX_PLAN, create_indexes
from storefront.db.transactions import transaction
from storefront.db.validators import COLLECTION_VALIDATORS, apply_validator, apply_validators


class TestIndexes:
    @pytest.mark.asyncio
    async def test_creates_every_planned_index(self, mock_db):
        for name in {collection for collection, _, _ in INDEX_PLAN}:
            mock_db[name].create_index.return_value = f"{name}_idx"

        created = await create_indexes(mock_db)

        assert len(created) == len(INDEX_PLAN)
        calls = sum(mock_db[name].create_index.await_count for name in mock_db.collections)
        assert calls == len(INDEX_PLAN)

    @pytest.mark.asyncio
    async def test_unique_and_text_indexes(self, mock_db):
        await create_indexes(mock_db)

        users_calls = mock_db.users.create_index.call_args_list
        assert any(c.args[0] == "email" and c.kwargs.get("unique") for c in users_calls)
        assert any(c.args[0] == "phone" and c.kwargs.get("sparse") for c in users_calls)

        products_calls = mock_db.products.create_index.call_args_list
        assert any(c.args[0] == [("name", TEXT), ("description", TEXT)] for c in products_calls)

    def test_plan_covers_owned_collections(self):
        collections = {collection for collection, _, _ in indexes.INDEX_PLAN}
        assert collections == {"products", "orders", "users", "authors", "posts", "accounts"}


class TestValidators:
    @pytest.mark.asyncio
    async def test_coll_mod_on_existing_collection(self, mock_db):
        await apply_validator(mock_db, "products", validators.PRODUCT_SCHEMA)

        mock_db.command.assert_awaited_once_with("collMod", "products", validator=validators.PRODUCT_SCHEMA)
        mock_db.create_collection.assert_not_called()

    @pytest.mark.asyncio
    async def test_creates_missing_collection(self, mock_db):
        mock_db.command.side_effect = OperationFailure("ns not found", code=26)

        await apply_validator(mock_db, "accounts", validators.ACCOUNT_SCHEMA)

        mock_db.create_collection.assert_awaited_once_with("accounts", validator=validators.ACCOUNT_SCHEMA)

    @pytest.mark.asyncio
    async def test_other_failures_propagate(self, mock_db):
        mock_db.command.side_effect = OperationFailure("not authorized", code=13)

        with pytest.raises(OperationFailure):
            await apply_validator(mock_db, "accounts", validators.ACCOUNT_SCHEMA)

    @pytest.mark.asyncio
    async def test_apply_validators_skips_failures(self, mock_db):
        mock_db.command.side_effect = [None, OperationFailure("not authorized", code=13)]

        applied = await apply_validators(mock_db)

        assert applied == [list(COLLECTION_VALIDATORS)[0]]

    def test_product_schema_limits_categories(self):
        category = validators.PRODUCT_SCHEMA["$jsonSchema"]["properties"]["category"]
        assert "Electronics" in category["enum"]


class TestTransaction:
    @pytest.mark.asyncio
    async def test_commits_on_success(self, mock_db):
        async with transaction(mock_db) as session:
            assert session is mock_db.session
        assert mock_db.session.committed

    @pytest.mark.asyncio
    async def test_aborts_and_reraises(self, mock_db):
        with pytest.raises(ValueError):
            async with transaction(mock_db):
                raise ValueError("boom")
        assert mock_db.session.aborted
        assert not mock_db.session.committed


class TestDatabaseManager:
    def test_disconnected_manager(self):
        manager = DatabaseManager()
        assert not manager.is_connected()
        with pytest.raises(RuntimeError):
            manager.get_database()

    @pytest.mark.asyncio
    async def test_skips_setup_without_connection(self, monkeypatch):
        create = AsyncMock()
        monkeypatch.setattr("storefront.config.database.create_indexes", create)

        await DatabaseManager().prepare()

        create.assert_not_called()

    @pytest.mark.asyncio
    async def test_ping_reports_disconnected(self):
        assert await DatabaseManager().ping() == "disconnected"

    @pytest.mark.asyncio
    async def test_prepare_tolerates_index_failure(self, monkeypatch, mock_db):
        monkeypatch.setattr("storefront.config.database.create_indexes", AsyncMock(side_effect=RuntimeError("boom")))
        apply = AsyncMock(return_value=["products"])
        monkeypatch.setattr("storefront.config.database.apply_validators", apply)
        manager = DatabaseManager()
        manager.database = mock_db

        await manager.prepare(with_validators=True)

        apply.assert_awaited_once_with(mock_db)

    @pytest.mark.asyncio
    async def test_get_database_dependency_is_503_when_disconnected(self, monkeypatch):
        monkeypatch.setattr("storefront.config.database.db_manager", DatabaseManager())

        with pytest.raises(HTTPException) as exc_info:
            await get_database()

        assert exc_info.value.status_code == 503
