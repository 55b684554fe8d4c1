import re
from datetime import datetime, timezone

_WHITESPACE = re.compile(r"\s+")


def slugify(title: str) -> str:
    """Lowercase the title and replace whitespace runs with '-'."""
    return _WHITESPACE.sub("-", title.strip().lower())


def exact_ci_regex(value: str) -> dict:
    """Case-insensitive whole-value match filter."""
    return {"$regex": f"^{re.escape(value)}$", "$options": "i"}


def contains_ci_regex(value: str) -> dict:
    """Case-insensitive substring match filter."""
    return {"$regex": re.escape(value), "$options": "i"}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
