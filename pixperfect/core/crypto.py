"""Utilities for password hashing and verification."""

from __future__ import annotations

import bcrypt

from pixperfect.core.config import get_settings


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash plain text password using bcrypt with the configured cost factor."""
    cost = rounds if rounds is not None else get_settings().security.bcrypt_rounds
    salt = bcrypt.gensalt(rounds=cost)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


__all__ = ["hash_password", "verify_password"]
