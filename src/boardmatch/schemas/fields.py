"""Lenient coercion helpers shared by the schema validators."""

from __future__ import annotations

import json
import math
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

import pendulum


def parse_list(value: Any) -> list[str]:
    """Return a clean list of strings from a list or serialized JSON text.

    Anything that cannot be read as a list yields an empty list.
    """
    if value is None:
        return []
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        try:
            value = json.loads(text)
        except ValueError:
            return []
    if not isinstance(value, (list, tuple, set, frozenset)):
        return []

    items: list[str] = []
    for item in value:
        if item is None or isinstance(item, (dict, list)):
            continue
        text = str(item).strip()
        if text:
            items.append(text)
    return items


def parse_number(value: Any) -> float | None:
    """Coerce numbers and numeric strings to float; anything else is None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        try:
            value = float(value)
        except (InvalidOperation, ValueError):
            return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_text(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


def parse_date(value: Any) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = pendulum.parse(value.strip())
    except (ValueError, TypeError, OverflowError):
        return None
    if isinstance(parsed, datetime):
        return parsed.date()
    if isinstance(parsed, date):
        return parsed
    return None


def parse_score(value: Any) -> int | None:
    """Return a stored 0-100 score as int; anything else is None."""
    number = parse_number(value)
    if number is None or not 0 <= number <= 100:
        return None
    return int(number)


def parse_details(value: Any) -> dict[str, Any] | None:
    """Return a details mapping from a dict or serialized JSON object text."""
    if isinstance(value, (str, bytes)):
        try:
            value = json.loads(value)
        except ValueError:
            return None
    return dict(value) if isinstance(value, dict) else None


__all__ = [
    "parse_date",
    "parse_details",
    "parse_list",
    "parse_number",
    "parse_score",
    "parse_text",
]
