"""
Password hashing (bcrypt).

Hashing is CPU bound, so the async helpers push it to a worker thread.
"""
import asyncio

import bcrypt

from config.settings import settings
from core.errors import InvalidArgumentError

BCRYPT_MAX_BYTES = 72


def hash_password(plaintext: str) -> str:
    raw = plaintext.encode("utf-8")
    if not raw:
        raise InvalidArgumentError("password must not be empty")
    if len(raw) > BCRYPT_MAX_BYTES:
        raise InvalidArgumentError(f"password must be at most {BCRYPT_MAX_BYTES} bytes in UTF-8")
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(raw, salt).decode("utf-8")


def verify_password(plaintext: str, hashed: str) -> bool:
    """Check a login attempt against a stored hash (used by the auth flow)."""
    return bcrypt.checkpw(plaintext.encode("utf-8"), hashed.encode("utf-8"))


async def hash_password_async(plaintext: str) -> str:
    return await asyncio.to_thread(hash_password, plaintext)
