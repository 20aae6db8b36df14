from __future__ import annotations

from typing import Any

CALLER_HEADER = "x-caller"


def parse_caller(value: Any) -> str:
    if value is None:
        raise ValueError("Missing caller header: X-Caller")
    caller = str(value).strip()
    if not caller:
        raise ValueError("Empty caller header: X-Caller")
    return caller


def parse_principal_field(body: dict[str, Any], field: str) -> str:
    """Principals are stripped like the X-Caller header, so they stay reachable."""

    value = parse_text_field(body, field).strip()
    if not value:
        raise ValueError(f"{field} cannot be empty")
    return value


def parse_text_field(body: dict[str, Any], field: str, *, allow_empty: bool = True) -> str:
    if field not in body:
        raise ValueError(f"Missing field: {field}")
    value = body.get(field)
    if not isinstance(value, str):
        raise ValueError(f"Invalid {field}")
    if not allow_empty and not value:
        raise ValueError(f"{field} cannot be empty")
    return value


__all__ = ["CALLER_HEADER", "parse_caller", "parse_principal_field", "parse_text_field"]
