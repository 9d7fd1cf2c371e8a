"""
Credential service — register, login and profile update.

Orchestrates the user store, the password hasher and the token issuer.
Each public operation returns an ``AuthOutcome``; failures never escape
as exceptions.  Client-caused failures keep their status and reason,
anything else becomes a generic 500 and is only described in the log.

There is no locking between requests: two registrations for the same
email can both pass the look-up, in which case the store's unique index
rejects the second insert and it is reported as a duplicate email.
"""

from __future__ import annotations

import functools
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from auth.exceptions import (
    AuthError,
    ClientError,
    DuplicateEmail,
    DuplicateKeyError,
    InvalidCredentials,
    MissingIdentity,
    UserNotFound,
)
from auth.jwt import TokenIssuer
from auth.models import AuthOutcome, ProfilePatch
from auth.password import PasswordHasher
from database.users import UserStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _operation(func: Callable[..., Awaitable[AuthOutcome]]) -> Callable[..., Awaitable[AuthOutcome]]:
    """Convert everything raised by ``func`` into an error ``AuthOutcome``."""

    @functools.wraps(func)
    async def wrapper(self: "CredentialService", *args, **kwargs) -> AuthOutcome:
        try:
            return await func(self, *args, **kwargs)
        except ClientError as exc:
            logger.error("%s rejected: %s", func.__name__, exc.reason)
            return AuthOutcome.failure(exc.status_code, exc.reason)
        except AuthError as exc:
            logger.exception("%s failed: %s", func.__name__, exc)
            outcome = AuthOutcome.failure(exc.status_code, exc.reason)
        except Exception:
            logger.exception("%s failed unexpectedly", func.__name__)
            outcome = AuthOutcome.failure(500, AuthError.reason)

        # Internal failure: nothing flushed by this operation may be committed.
        try:
            await self.store.rollback()
        except AuthError as exc:
            logger.warning("%s rollback failed: %s", func.__name__, exc)
        return outcome

    return wrapper


class CredentialService:
    def __init__(
        self,
        store: UserStore,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
        clock: Optional[Clock] = None,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.issuer = issuer
        self._now = clock or _utcnow

    @_operation
    async def register(
        self,
        email: str,
        password: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> AuthOutcome:
        """Create a user and return ``{authtoken, email}``."""
        if await self.store.find_by_email(email) is not None:
            raise DuplicateEmail()

        password_hash = await self.hasher.hash(password)
        try:
            user = await self.store.insert(
                email=email,
                password_hash=password_hash,
                first_name=first_name,
                last_name=last_name,
                created_at=self._now(),
            )
        except DuplicateKeyError as exc:
            # Lost a concurrent registration race for the same email.
            raise DuplicateEmail() from exc

        token = self.issuer.issue(user.id)
        logger.info("User registered successfully (%s)", user.id)
        return AuthOutcome.success(authtoken=token, email=email)

    @_operation
    async def login(self, email: str, password: str) -> AuthOutcome:
        """Verify credentials and return ``{authtoken, userName, userEmail}``."""
        user = await self.store.find_by_email(email)
        if user is None:
            raise UserNotFound()

        if not await self.hasher.verify(password, user.password_hash):
            raise InvalidCredentials()

        token = self.issuer.issue(user.id)
        logger.info("User logged in successfully (%s)", user.id)
        return AuthOutcome.success(
            authtoken=token,
            userName=user.first_name,
            userEmail=user.email,
        )

    @_operation
    async def update_profile(self, email: Optional[str], patch: ProfilePatch) -> AuthOutcome:
        """
        Apply ``patch`` to the user identified by ``email`` and return
        ``{authtoken}``.

        ``email`` is asserted by the caller (request header); the password
        is not re-checked.
        """
        if not email or not email.strip():
            raise MissingIdentity()

        if await self.store.find_by_email(email) is None:
            raise UserNotFound()

        updated = await self.store.update_by_email(email, patch, updated_at=self._now())
        if updated is None:
            raise UserNotFound()

        token = self.issuer.issue(updated.id)
        logger.info("User profile updated (%s)", updated.id)
        return AuthOutcome.success(authtoken=token)
