from datetime import datetime
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId

from ..errors import DocumentError
from ..utils import to_iso, utcnow


def document_id(doc: dict[str, Any]) -> str:
    return str(doc.get("_id", doc.get("id", "")))


def object_id(value: str) -> Optional[ObjectId]:
    """Parse a public id; malformed ids resolve to nothing."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def iso_timestamp(value: Any, field: str, default_now: bool = True) -> Optional[str]:
    """Convert a stored timestamp to the ISO string exposed by the API."""
    if value is None:
        return to_iso(utcnow()) if default_now else None
    if isinstance(value, datetime):
        return to_iso(value)
    if isinstance(value, str):
        try:
            return to_iso(datetime.fromisoformat(value.replace("Z", "+00:00")))
        except ValueError as exc:
            raise DocumentError(f"{field} is not a timestamp: {value!r}") from exc
    raise DocumentError(f"{field} has unsupported type {type(value).__name__}")
