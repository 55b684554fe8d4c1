"""
$lookup helpers for references stored as string ids.
"""
from typing import Any, Dict, List, Optional


def to_object_id(field_path: str) -> Dict[str, Any]:
    """Convert a string id field to ObjectId; malformed ids become null."""
    return {
        "$convert": {
            "input": field_path,
            "to": "objectId",
            "onError": None,
            "onNull": None,
        }
    }


def lookup_one(
    from_collection: str,
    local_field: str,
    as_field: str,
    projection: Optional[Dict[str, int]] = None,
) -> List[Dict[str, Any]]:
    """
    Join a single referenced document onto ``as_field``.

    Returns two stages: the $lookup and an $unwind that keeps documents whose
    reference is dangling (``as_field`` is then missing).
    """
    inner: List[Dict[str, Any]] = [{"$match": {"$expr": {"$eq": ["$_id", "$$ref_id"]}}}]
    if projection:
        inner.append({"$project": projection})

    return [
        {
            "$lookup": {
                "from": from_collection,
                "let": {"ref_id": to_object_id(f"${local_field}")},
                "pipeline": inner,
                "as": as_field,
            }
        },
        {"$unwind": {"path": f"${as_field}", "preserveNullAndEmptyArrays": True}},
    ]
