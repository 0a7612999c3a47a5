"""Reusable field validation helpers."""

import re
from typing import Any, Optional

URL_PATTERN = re.compile(r"^https?://[^\s/$.?#][^\s]*$", re.IGNORECASE)

# bcrypt only reads the first 72 bytes of a password
PASSWORD_MAX_BYTES = 72


def normalize_email(value: Any) -> Any:
    """Trim and lower-case an email before ``EmailStr`` checks its shape."""
    if isinstance(value, str):
        return value.strip().lower()
    return value


def require_text(value: str) -> str:
    """Trim a string and reject it if nothing is left."""
    stripped = value.strip()
    if not stripped:
        raise ValueError("Field cannot be empty or whitespace only")
    return stripped


def check_password_length(value: str) -> str:
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password cannot be longer than {PASSWORD_MAX_BYTES} bytes")
    return value


def optional_url(value: Optional[str]) -> Optional[str]:
    """Accept None or an empty string as absent; otherwise require http(s)."""
    if value is None or not value.strip():
        return None
    url = value.strip()
    if not URL_PATTERN.match(url):
        raise ValueError("Invalid URL")
    return url
