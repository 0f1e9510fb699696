"""Encode/decode Python values to/from the Parse REST JSON format."""

from datetime import datetime, timezone
from typing import Any

from cloudcode.application.dtos.document import Document, Pointer
from cloudcode.domain.value_objects.acl import ACL

# Keys Parse manages itself; never sent back in a write body.
_RESERVED_KEYS = frozenset({
    "objectId", "createdAt", "updatedAt", "ACL", "className", "__type",
    "sessionToken", "authData",
})


def _format_date(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def _parse_date(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def encode_value(v: Any) -> Any:
    if isinstance(v, Pointer):
        return {"__type": "Pointer", "className": v.class_name, "objectId": v.object_id}
    if isinstance(v, Document):
        return encode_value(v.pointer())
    if isinstance(v, ACL):
        return v.to_dict()
    if isinstance(v, datetime):
        return {"__type": "Date", "iso": _format_date(v)}
    if isinstance(v, (list, tuple, set)):
        return [encode_value(x) for x in v]
    if isinstance(v, dict):
        return {k: encode_value(x) for k, x in v.items()}
    return v


def encode_where(where: dict[str, Any]) -> dict[str, Any]:
    """Convert a Query.where map to the REST where JSON."""
    return {key: encode_value(value) for key, value in where.items()}


def encode_document(document: Document) -> dict[str, Any]:
    """Body for POST/PUT: writable fields plus the ACL when one is set."""
    body = {
        key: encode_value(value)
        for key, value in document.data.items()
        if key not in _RESERVED_KEYS
    }
    if document.acl is not None:
        body["ACL"] = document.acl.to_dict()
    return body


def decode_value(obj: Any) -> Any:
    if isinstance(obj, list):
        return [decode_value(x) for x in obj]
    if not isinstance(obj, dict):
        return obj
    kind = obj.get("__type")
    if kind == "Pointer":
        return Pointer(obj["className"], obj["objectId"])
    if kind == "Object":
        return decode_document(obj["className"], obj)
    if kind == "Date":
        return _parse_date(obj["iso"])
    return {k: decode_value(x) for k, x in obj.items()}


def decode_document(class_name: str, raw: dict[str, Any]) -> Document:
    """Convert a REST object (top-level result or included object) to a Document."""
    data: dict[str, Any] = {}
    for key, value in raw.items():
        if key in ("objectId", "ACL", "className", "__type"):
            continue
        if key in ("createdAt", "updatedAt") and isinstance(value, str):
            data[key] = _parse_date(value)
            continue
        data[key] = decode_value(value)
    acl = ACL.from_dict(raw["ACL"]) if isinstance(raw.get("ACL"), dict) else None
    return Document(
        class_name=raw.get("className", class_name),
        object_id=raw.get("objectId"),
        data=data,
        acl=acl,
    )
