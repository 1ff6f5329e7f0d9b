"""Shared serialization utilities for bus payloads."""

import json
from dataclasses import fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from credit_scoring.exceptions import ValidationError


def to_dict(obj: Any) -> dict:
    """Convert object to a JSON-compatible dictionary."""
    if hasattr(obj, "to_payload"):
        return obj.to_payload()
    elif is_dataclass(obj):
        return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}
    elif isinstance(obj, dict):
        return serialize_value(obj)
    else:
        return {"value": str(obj)}


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value


def encode(payload: Any) -> bytes:
    """Encode a payload as UTF-8 JSON bytes."""
    return json.dumps(to_dict(payload), ensure_ascii=False).encode("utf-8")


def decode(raw: bytes | str) -> dict:
    """Decode UTF-8 JSON bytes into a payload dictionary.

    Raises
    ------
    ValidationError
        If the bytes are not a JSON object.
    """
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValidationError(f"Message is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValidationError("Message must be a JSON object")
    return data
