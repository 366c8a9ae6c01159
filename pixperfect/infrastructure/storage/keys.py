"""Storage key generation shared by every blob store backend."""

from __future__ import annotations

import os
import re
import uuid

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
MAX_NAME_LENGTH = 100


def sanitize_filename(filename: str | None) -> str | None:
    if not filename:
        return None
    name = os.path.basename(filename.replace("\\", "/"))
    name = _UNSAFE_CHARS.sub("_", name.replace("\0", "").strip()).strip("._")
    return name[-MAX_NAME_LENGTH:] or None


def generate_key(suggested_name: str | None, prefix: str = "") -> str:
    """Return a fresh key; the random component keeps concurrent identical names apart."""
    name = sanitize_filename(suggested_name) or "image"
    return f"{prefix}{uuid.uuid4().hex}-{name}"


__all__ = ["generate_key", "sanitize_filename"]
