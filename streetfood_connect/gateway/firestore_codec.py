# streetfood_connect/gateway/firestore_codec.py
"""Conversion between plain Python values and Firestore REST typed values."""

import re
from datetime import datetime, timezone
from typing import Any, Dict

_TS_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.(?P<frac>\d+))?(?P<tz>Z|[+-]\d{2}:\d{2})$"
)


def encode_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def decode_timestamp(text: str) -> datetime:
    # Firestore sends up to nanosecond precision; datetime keeps microseconds
    m = _TS_RE.match(text)
    if not m:
        raise ValueError(f"Bad timestamp: {text!r}")
    frac = (m.group("frac") or "0")[:6].ljust(6, "0")
    tz = "+00:00" if m.group("tz") == "Z" else m.group("tz")
    return datetime.fromisoformat(f"{m.group('base')}.{frac}{tz}")


def encode_value(value: Any) -> Dict[str, Any]:
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, datetime):
        return {"timestampValue": encode_timestamp(value)}
    if isinstance(value, dict):
        return {"mapValue": {"fields": encode_fields(value)}}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    raise TypeError(f"Cannot store {type(value).__name__} in a document")


def decode_value(value: Dict[str, Any]) -> Any:
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "stringValue" in value:
        return value["stringValue"]
    if "timestampValue" in value:
        return decode_timestamp(value["timestampValue"])
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values", [])]
    if "referenceValue" in value:
        return value["referenceValue"]
    if "geoPointValue" in value:
        return dict(value["geoPointValue"])
    if "bytesValue" in value:
        return value["bytesValue"]
    raise ValueError(f"Unknown Firestore value: {sorted(value)}")


def encode_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: encode_value(v) for k, v in data.items()}


def decode_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {k: decode_value(v) for k, v in fields.items()}


def document_id(name: str) -> str:
    return name.rsplit("/", 1)[-1]


def decode_document(doc: Dict[str, Any]) -> Dict[str, Any]:
    return {"id": document_id(doc["name"]), **decode_fields(doc.get("fields", {}))}
