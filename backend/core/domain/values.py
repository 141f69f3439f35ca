"""Coercion helpers for values coming back from either query backend.

REST rows carry ISO-8601 strings and JSON numbers, SQL rows carry native
``datetime`` and ``Decimal`` objects. Domain entities accept both.
"""

from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Any


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a timestamp into an aware datetime (naive values are taken as UTC)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def parse_decimal(value: Any) -> Decimal:
    """Parse a currency amount, falling back to zero for missing or malformed values."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")


def resolve_embed(row: Any, path: tuple[str, ...]) -> dict[str, Any] | None:
    """Follow nested embedded mappings; None as soon as a level is missing."""
    current = row
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current if isinstance(current, dict) else None


def parse_count(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0
