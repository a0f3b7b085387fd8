"""Shared field checks for request schemas.

Each helper raises ``ValueError`` with the message the API returns verbatim.
"""

from typing import Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import HttpUrl, TypeAdapter, ValidationError

_http_url = TypeAdapter(HttpUrl)


def check_name(value: str, field: str = "Name") -> str:
    value = value.strip()
    if len(value) < 2:
        raise ValueError(f"{field} must be at least 2 characters")
    return value


def check_email(value: str) -> str:
    try:
        result = validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError:
        raise ValueError("Invalid email address")
    return result.normalized.lower()


def check_optional_email(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return check_email(value)


def check_password(value: str) -> str:
    if len(value) < 8:
        raise ValueError("Password must be at least 8 characters")
    # bcrypt only looks at the first 72 bytes
    if len(value.encode("utf-8")) > 72:
        raise ValueError("Password must be at most 72 bytes")
    return value


def check_optional_url(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    value = value.strip()
    try:
        _http_url.validate_python(value)
    except ValidationError:
        raise ValueError("Invalid url")
    return value


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None
