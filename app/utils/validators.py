# app/utils/validators.py
"""
Field validators shared by the registration and catalogue forms.
"""

import re
from urllib.parse import urlparse

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value or ""))


def is_valid_url(value: str) -> bool:
    """
    Accept any absolute URL with a scheme and a network location.

    Examples:
        https://example.com      -> True
        ftp://files.example.com  -> True
        example.com              -> False
    """
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


def clean_str(value) -> str:
    """Trimmed string form of a form value; non-strings become empty."""
    return value.strip() if isinstance(value, str) else ""
