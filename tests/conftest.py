"""
Shared fixtures: an in-memory user store with the same async interface as
``database.users.UserStore`` and a service wired around it.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Dict, Optional

import pytest

from auth.exceptions import DuplicateKeyError
from auth.jwt import TokenIssuer
from auth.models import ProfilePatch, UserRecord
from auth.password import PasswordHasher
from auth.service import CredentialService

TEST_SECRET = "test-jwt-secret-with-at-least-32-bytes"


class InMemoryUserStore:
    """Dict-backed store keyed by email, with a unique-email check on insert."""

    def __init__(self) -> None:
        self.users: Dict[str, UserRecord] = {}
        self.rollbacks = 0

    async def rollback(self) -> None:
        self.rollbacks += 1

    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        return self.users.get(email)

    async def insert(self, *, email, password_hash, first_name, last_name, created_at) -> UserRecord:
        if email in self.users:
            raise DuplicateKeyError(email)
        record = UserRecord(
            id=str(uuid.uuid4()),
            email=email,
            first_name=first_name,
            last_name=last_name,
            password_hash=password_hash,
            created_at=created_at,
        )
        self.users[email] = record
        return record

    async def update_by_email(self, email, patch: ProfilePatch, *, updated_at) -> Optional[UserRecord]:
        current = self.users.get(email)
        if current is None:
            return None
        updated = current.model_copy(update={**patch.changes(), "updated_at": updated_at})
        self.users[email] = updated
        return updated


class FixedClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def hasher() -> PasswordHasher:
    # Minimum bcrypt cost keeps the suite fast.
    return PasswordHasher(rounds=4)


@pytest.fixture
def jwt_secret() -> str:
    return TEST_SECRET


@pytest.fixture
def issuer(jwt_secret) -> TokenIssuer:
    return TokenIssuer(jwt_secret)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def service(store, hasher, issuer, clock) -> CredentialService:
    return CredentialService(store=store, hasher=hasher, issuer=issuer, clock=clock)
