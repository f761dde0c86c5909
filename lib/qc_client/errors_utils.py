from __future__ import annotations


def error_message(payload: object, default: str) -> str:
    """Pick the human readable message out of a backend error body."""
    if isinstance(payload, dict):
        for key in ("error", "detail", "message"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return default
