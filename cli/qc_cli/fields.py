from __future__ import annotations

import json
from typing import Any


def parse_fields(values: list[str] | None) -> dict[str, Any]:
    """Turn ``key=value`` pairs into a request body.

    Values that parse as JSON (numbers, booleans, objects) keep their type,
    anything else is sent as a string.
    """
    body: dict[str, Any] = {}
    for raw in values or []:
        if "=" not in raw:
            raise ValueError(f"Invalid field '{raw}'. Expected '<key>=<value>'.")
        key, value = raw.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError(f"Invalid field '{raw}'. Key is empty.")
        try:
            body[key] = json.loads(value)
        except ValueError:
            body[key] = value
    return body


def record_id(item: dict[str, Any]) -> str:
    return str(item.get("_id") or item.get("id") or "-")


def ref_name(value: Any) -> str:
    """Display a populated reference (``{"_id":..., "name":...}``) or a raw id."""
    if isinstance(value, dict):
        return str(value.get("name") or value.get("title") or value.get("_id") or "-")
    return str(value or "-")
