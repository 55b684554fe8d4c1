"""
MongoDB document serialization utilities
"""
from typing import Any, Dict, List, Optional

from bson import ObjectId


def serialize_doc(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Convert ObjectIds to strings for JSON serialization

    Args:
        doc: MongoDB document dictionary

    Returns:
        Serialized copy of the document, or None if input is None
    """
    if doc is None:
        return None
    return convert_object_ids(doc)


def serialize_docs(docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Serialize a list of MongoDB documents, dropping None entries."""
    return [serialize_doc(doc) for doc in docs if doc is not None]


def convert_object_ids(doc: Any) -> Any:
    """
    Recursively convert ObjectId instances to strings in a document.
    Covers ids embedded by $lookup stages and nested arrays.
    """
    if isinstance(doc, dict):
        return {key: convert_object_ids(value) for key, value in doc.items()}
    elif isinstance(doc, list):
        return [convert_object_ids(item) for item in doc]
    elif isinstance(doc, ObjectId):
        return str(doc)
    else:
        return doc


def attributes_to_list(attributes: Optional[Dict[str, str]]) -> List[Dict[str, str]]:
    """Stored ``{name: value}`` attribute mapping -> API list of pairs."""
    return [{"name": k, "value": v} for k, v in (attributes or {}).items()]
