import datetime
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from bson.errors import InvalidId

# Storage key -> JSON key for note documents
NOTE_FIELDS = {
    "title": "title",
    "content": "content",
    "date": "date",
    "tag_ids": "tagIds",
    "is_pinned": "isPinned",
    "is_journal": "isJournal",
}

TAG_FIELDS = {
    "name": "name",
    "color": "color",
}


def parse_object_id(value: Any) -> Optional[ObjectId]:
    """Return the ObjectId for a path id, or None when it cannot name any record."""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str):
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def canonical_tag_ids(values: Optional[List[str]]) -> Optional[List[str]]:
    """Rewrites tag references to lowercase hex ObjectIds; raises ValueError on a non-id."""
    if values is None:
        return None
    canonical = []
    for value in values:
        object_id = parse_object_id(value)
        if object_id is None:
            raise ValueError(f"'{value}' is not a valid tag id")
        canonical.append(str(object_id))
    return canonical


def format_iso(dt: datetime.datetime) -> str:
    """Render a datetime as UTC with millisecond precision and a 'Z' suffix."""
    dt = dt.astimezone(datetime.timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def utc_now_iso() -> str:
    return format_iso(datetime.datetime.now(datetime.timezone.utc))


def normalize_date(value: Union[str, int, float, None]) -> Optional[str]:
    """
    Normalizes a client supplied date into the stored ISO-8601 form.
    Accepts ISO-8601 strings (date only or date-time, optional offset or 'Z')
    and epoch timestamps in milliseconds. Naive values are taken as UTC.
    Returns None for anything that does not parse.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            dt = datetime.datetime.fromtimestamp(value / 1000, tz=datetime.timezone.utc)
        elif isinstance(value, str) and value.strip():
            text = value.strip()
            if text.endswith(("Z", "z")):
                text = text[:-1] + "+00:00"
            dt = datetime.datetime.fromisoformat(text)
        else:
            return None
    except (ValueError, OverflowError, OSError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return format_iso(dt)


def note_to_response(doc: Dict[str, Any]) -> Dict[str, Any]:
    response = {"id": str(doc["_id"])}
    for storage_key, json_key in NOTE_FIELDS.items():
        response[json_key] = doc.get(storage_key)
    response["tagIds"] = [str(tag_id) for tag_id in doc.get("tag_ids") or []]
    response["isPinned"] = bool(doc.get("is_pinned", False))
    response["isJournal"] = bool(doc.get("is_journal", False))
    response["ownerId"] = doc["user_id"]
    return response


def tag_to_response(doc: Dict[str, Any]) -> Dict[str, Any]:
    response = {"id": str(doc["_id"])}
    for storage_key, json_key in TAG_FIELDS.items():
        response[json_key] = doc.get(storage_key)
    response["ownerId"] = doc["user_id"]
    return response


def to_storage_fields(fields: Dict[str, Any], mapping: Dict[str, str]) -> Dict[str, Any]:
    """Translate JSON keys to storage keys, dropping unknown keys and None values."""
    reverse = {json_key: storage_key for storage_key, json_key in mapping.items()}
    return {
        reverse[key]: value
        for key, value in fields.items()
        if key in reverse and value is not None
    }
