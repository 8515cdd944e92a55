"""Password hashing with bcrypt."""

from __future__ import annotations

import asyncio

import bcrypt

from ..config import settings


def _hash(password: str, rounds: int) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def _verify(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


async def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a password off the event loop."""
    return await asyncio.to_thread(_hash, password, rounds or settings.bcrypt_rounds)


async def verify_password(password: str, hashed: str) -> bool:
    """Compare a plain password against a stored bcrypt hash."""
    return await asyncio.to_thread(_verify, password, hashed)
