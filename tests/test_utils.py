"""
Tests for serializers, id validation, slugs and password hashing.
"""
import bcrypt
import pytest
from bson import ObjectId
from fastapi import HTTPException

from storefront.utils.dependencies import (
    get_document_or_404,
    validate_object_id,
    validate_pagination_params,
    verify_products_exist,
)
from storefront.utils.security import hash_password
from storefront.utils.serializers import attributes_to_list, convert_object_ids, serialize_doc, serialize_docs
from storefront.utils.text import exact_ci_regex, slugify
from tests.conftest import make_cursor


class TestSerializers:
    def test_serialize_doc_converts_nested_ids(self):
        oid, ref = ObjectId(), ObjectId()
        doc = {"_id": oid, "author": {"_id": ref}, "refs": [ref, "plain"]}

        result = serialize_doc(doc)

        assert result == {"_id": str(oid), "author": {"_id": str(ref)}, "refs": [str(ref), "plain"]}
        # Original untouched
        assert doc["_id"] is oid

    def test_serialize_none(self):
        assert serialize_doc(None) is None

    def test_serialize_docs_skips_none(self):
        assert serialize_docs([{"a": 1}, None]) == [{"a": 1}]

    def test_convert_scalar(self):
        oid = ObjectId()
        assert convert_object_ids(oid) == str(oid)
        assert convert_object_ids(3) == 3

    def test_attributes_to_list(self):
        assert attributes_to_list({"size": "M"}) == [{"name": "size", "value": "M"}]
        assert attributes_to_list(None) == []


class TestObjectIdValidation:
    def test_valid_id(self):
        oid = ObjectId()
        assert validate_object_id(str(oid)) == oid

    def test_invalid_id_is_400(self):
        with pytest.raises(HTTPException) as exc_info:
            validate_object_id("not-an-id", "product")
        assert exc_info.value.status_code == 400
        assert "product" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_get_document_or_404_missing(self, mock_db):
        mock_db.orders.find_one.return_value = None

        with pytest.raises(HTTPException) as exc_info:
            await get_document_or_404(mock_db, "orders", str(ObjectId()), "order")
        assert exc_info.value.status_code == 404
        assert exc_info.value.detail.startswith("Order ")

    @pytest.mark.asyncio
    async def test_verify_products_exist_reports_missing(self, mock_db, product_doc):
        missing = str(ObjectId())
        mock_db.products.find.return_value = make_cursor([product_doc])

        with pytest.raises(HTTPException) as exc_info:
            await verify_products_exist([str(product_doc["_id"]), missing], mock_db)
        assert exc_info.value.status_code == 404
        assert missing in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_verify_products_exist_maps_by_id(self, mock_db, product_doc):
        mock_db.products.find.return_value = make_cursor([product_doc])

        product_map = await verify_products_exist([str(product_doc["_id"])], mock_db)
        assert product_map == {str(product_doc["_id"]): product_doc}

    @pytest.mark.asyncio
    async def test_verify_products_exist_accepts_uppercase_ids(self, mock_db, product_doc):
        mock_db.products.find.return_value = make_cursor([product_doc])

        product_map = await verify_products_exist([str(product_doc["_id"]).upper()], mock_db)
        assert list(product_map) == [str(product_doc["_id"])]


class TestPagination:
    def test_valid(self):
        assert validate_pagination_params(10, 20) == (10, 20)

    @pytest.mark.parametrize("limit,offset", [(0, 0), (101, 0), (10, -1)])
    def test_invalid(self, limit, offset):
        with pytest.raises(HTTPException) as exc_info:
            validate_pagination_params(limit, offset)
        assert exc_info.value.status_code == 400


class TestText:
    @pytest.mark.parametrize("title,slug", [
        ("Hello World", "hello-world"),
        ("  Many   spaces\there ", "many-spaces-here"),
        ("Single", "single"),
    ])
    def test_slugify(self, title, slug):
        assert slugify(title) == slug

    def test_exact_regex_escapes(self):
        assert exact_ci_regex("a+b") == {"$regex": r"^a\+b$", "$options": "i"}


class TestPasswords:
    def test_hash_is_salted_bcrypt(self):
        hashed = hash_password("Secret123")
        assert hashed.startswith("$2")
        assert hashed != hash_password("Secret123")
        assert bcrypt.checkpw(b"Secret123", hashed.encode())
        assert not bcrypt.checkpw(b"Secret124", hashed.encode())
