# app/utils/sanitize.py
import os
import re
from typing import Optional

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")
MAX_OBJECT_NAME_LENGTH = 120


def safe_object_name(filename: str, default: str = "image") -> str:
    """Reduce a client-supplied filename to a storage-safe object name.

    Path components are dropped, every character outside ``[A-Za-z0-9._-]``
    becomes ``_`` and the result is capped at 120 characters. An empty name
    falls back to ``default``.
    """
    basename = os.path.basename((filename or "").replace("\\", "/"))
    cleaned = _UNSAFE_CHARS.sub("_", basename)[:MAX_OBJECT_NAME_LENGTH]
    return cleaned or default


def build_object_path(
    folder: str,
    owner_id: str,
    filename: str,
    stamp_ms: int,
    default: str = "image",
    sequence: Optional[int] = None,
) -> str:
    # The sequence keeps same-named files of one request on distinct keys.
    stamp = f"{stamp_ms}" if sequence is None else f"{stamp_ms}-{sequence}"
    return f"{folder}/{owner_id}/{stamp}_{safe_object_name(filename, default)}"
