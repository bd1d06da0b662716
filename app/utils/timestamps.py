# app/utils/timestamps.py
"""
Normalization of stored instants.

Campaign documents may carry instants in several shapes depending on which
client wrote them. Everything is reduced to Unix-epoch milliseconds; a value
that cannot be interpreted is treated as absent rather than as an error.
"""

import math
from datetime import date, datetime, timezone
from typing import Any, Optional


def _datetime_to_ms(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def _parse_iso(value: str) -> Optional[int]:
    text = value.strip()
    if not text:
        return None
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return _datetime_to_ms(parsed)


def _structured_to_ms(value: dict) -> Optional[int]:
    # {seconds, nanoseconds} as written by document-database clients, or the
    # {_seconds, _nanoseconds} form they serialize to JSON.
    seconds = value.get("seconds", value.get("_seconds"))
    nanos = value.get("nanoseconds", value.get("_nanoseconds", 0))
    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
        return None
    if isinstance(nanos, bool) or not isinstance(nanos, (int, float)):
        nanos = 0
    if not math.isfinite(seconds) or not math.isfinite(nanos):
        return None
    millis = seconds * 1000
    if not math.isfinite(millis):
        return None
    return int(millis) + int(nanos // 1_000_000)


def to_epoch_ms(value: Any) -> Optional[int]:
    """Return ``value`` as epoch milliseconds, or None when it is not an instant."""
    try:
        return _to_ms(value)
    except (OverflowError, ValueError, OSError):
        # Finite inputs can still overflow once scaled to milliseconds.
        return None


def _to_ms(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _datetime_to_ms(value)
    if isinstance(value, date):
        return _datetime_to_ms(datetime(value.year, value.month, value.day))
    if isinstance(value, (int, float)):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        return _parse_iso(value)
    if isinstance(value, dict):
        return _structured_to_ms(value)
    return None


def now_ms() -> int:
    return _datetime_to_ms(datetime.now(timezone.utc))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
