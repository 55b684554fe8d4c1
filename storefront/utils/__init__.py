from .serializers import attributes_to_list, convert_object_ids, serialize_doc, serialize_docs
from .dependencies import (
    get_document_or_404,
    validate_object_id,
    validate_pagination_params,
    verify_product_exists,
    verify_products_exist,
)
from .security import hash_password
from .text import contains_ci_regex, exact_ci_regex, slugify, utcnow

__all__ = [
    "attributes_to_list",
    "convert_object_ids",
    "serialize_doc",
    "serialize_docs",
    "get_document_or_404",
    "validate_object_id",
    "validate_pagination_params",
    "verify_product_exists",
    "verify_products_exist",
    "hash_password",
    "contains_ci_regex",
    "exact_ci_regex",
    "slugify",
    "utcnow",
]
