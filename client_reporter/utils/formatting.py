"""Display helpers shared by the dashboard templates and the API."""

from __future__ import annotations

import json
import re
import secrets
import string
from datetime import date, datetime
from typing import Any, TypeVar

T = TypeVar("T")

_ID_ALPHABET = string.ascii_letters + string.digits


def format_date(value: date | datetime | str | None, fmt: str = "%b %-d, %Y") -> str:
    """Render a date like ``Jan 5, 2025``. ISO strings are accepted."""
    if value is None or value == "":
        return ""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    # %-d is glibc only
    return value.strftime(fmt.replace("%-d", str(value.day)))


def format_number(num: int | float) -> str:
    if isinstance(num, float) and not num.is_integer():
        return f"{num:,.3f}".rstrip("0").rstrip(".")
    return f"{int(num):,}"


def format_currency(amount: float, currency: str = "USD") -> str:
    symbols = {"USD": "$", "EUR": "€", "GBP": "£"}
    sign = "-" if amount < 0 else ""
    symbol = symbols.get(currency.upper())
    if symbol is None:
        return f"{sign}{currency.upper()} {abs(amount):,.2f}"
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_percent(value: float, decimals: int = 1) -> str:
    prefix = "+" if value >= 0 else ""
    return f"{prefix}{value:.{decimals}f}%"


def get_initials(name: str | None) -> str:
    if not name:
        return "U"
    return "".join(part[0] for part in name.split() if part).upper()[:2] or "U"


def truncate(text: str, length: int) -> str:
    if len(text) <= length:
        return text
    return text[:length] + "..."


def slugify(text: str) -> str:
    text = text.lower()
    text = re.sub(r"[^\w\s-]", "", text)
    text = re.sub(r"[\s_-]+", "-", text)
    return text.strip("-")


def generate_id(length: int = 12) -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


def safe_json_parse(raw: str, fallback: T) -> Any | T:
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        return fallback


def calculate_change(current: float, previous: float) -> float:
    """Percentage change from ``previous`` to ``current``."""
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / previous * 100


JINJA_FILTERS = {
    "format_date": format_date,
    "format_number": format_number,
    "format_currency": format_currency,
    "format_percent": format_percent,
    "initials": get_initials,
    "truncate_text": truncate,
}
