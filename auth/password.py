"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.

bcrypt only reads the first 72 bytes of a password.  Longer passwords are
truncated to that prefix (UTF-8 bytes) before hashing and before checking,
so both sides always agree.
"""

from __future__ import annotations

import asyncio
import re

import bcrypt

from auth.exceptions import HashFormatError

DEFAULT_ROUNDS = 10
MAX_PASSWORD_BYTES = 72

_BCRYPT_HASH = re.compile(r"\$2[abxy]?\$(0[4-9]|[12]\d|3[01])\$[./A-Za-z0-9]{53}")


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:MAX_PASSWORD_BYTES]


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with bcrypt (fresh salt on every call)."""
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """
    Constant-time comparison against a bcrypt hash.

    Raises ``HashFormatError`` when ``password_hash`` is not a bcrypt hash,
    so corrupted storage is never mistaken for a wrong password.
    """
    if not isinstance(password_hash, str) or not _BCRYPT_HASH.fullmatch(password_hash):
        raise HashFormatError("Malformed password hash")
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode())
    except ValueError as exc:
        raise HashFormatError(f"Malformed password hash: {exc}") from exc


class PasswordHasher:
    """Async facade over bcrypt; the work runs in a worker thread."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        if not 4 <= rounds <= 31:
            raise ValueError(f"bcrypt rounds must be between 4 and 31, got {rounds}")
        self.rounds = rounds

    async def hash(self, password: str) -> str:
        return await asyncio.to_thread(hash_password, password, self.rounds)

    async def verify(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(verify_password, password, password_hash)
