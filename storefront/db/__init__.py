"""
Database-side setup: indexes, collection validators and transactions.
"""
from .indexes import INDEX_PLAN, create_indexes
from .transactions import transaction
from .validators import COLLECTION_VALIDATORS, apply_validators

__all__ = [
    "INDEX_PLAN",
    "create_indexes",
    "transaction",
    "COLLECTION_VALIDATORS",
    "apply_validators",
]
