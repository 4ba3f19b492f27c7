"""Password hashing with bcrypt."""

from __future__ import annotations

import asyncio

import bcrypt

from ..config import settings


def _hash(password: str, rounds: int) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def _check(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed hash in the store
        return False


async def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash ``password`` at the configured cost factor."""
    return await asyncio.to_thread(_hash, password, rounds or settings.bcrypt_rounds)


async def verify_password(password: str, hashed: str) -> bool:
    """Return True if ``password`` matches ``hashed``."""
    return await asyncio.to_thread(_check, password, hashed)
