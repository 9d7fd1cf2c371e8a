"""
User store gateway — look-up, insert and update of user records by email.

Every call is a single awaited round trip on the request's ``AsyncSession``.
Nothing here retries: driver-level connection failures surface as
``StoreUnavailableError`` and the caller decides what to do.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.exceptions import DuplicateKeyError, StoreUnavailableError
from auth.models import ProfilePatch, UserRecord
from database.models import User

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (OperationalError, InterfaceError, PoolTimeoutError, TimeoutError, OSError) as exc:
        logger.warning("User store %s failed: %s", operation, exc.__class__.__name__)
        raise StoreUnavailableError(f"user store unavailable during {operation}") from exc
    except DBAPIError as exc:
        if exc.connection_invalidated:
            raise StoreUnavailableError(f"user store connection lost during {operation}") from exc
        raise


class UserStore:
    """Gateway over the ``users`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def rollback(self) -> None:
        """Discard writes flushed on this session but not yet committed."""
        with _store_errors("rollback"):
            await self._session.rollback()

    async def _get_row(self, email: str) -> Optional[User]:
        result = await self._session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        with _store_errors("find_by_email"):
            row = await self._get_row(email)
        return UserRecord.model_validate(row) if row is not None else None

    async def insert(
        self,
        *,
        email: str,
        password_hash: str,
        first_name: Optional[str],
        last_name: Optional[str],
        created_at: datetime,
    ) -> UserRecord:
        """Persist a new user under a freshly assigned UUID ``id``."""
        row = User(
            id=str(uuid.uuid4()),
            email=email,
            first_name=first_name,
            last_name=last_name,
            password_hash=password_hash,
            created_at=created_at,
        )
        with _store_errors("insert"):
            self._session.add(row)
            try:
                await self._session.flush()
            except IntegrityError as exc:
                await self._session.rollback()
                raise DuplicateKeyError(f"email {email!r} already stored") from exc
        return UserRecord.model_validate(row)

    async def update_by_email(
        self,
        email: str,
        patch: ProfilePatch,
        *,
        updated_at: datetime,
    ) -> Optional[UserRecord]:
        """
        Apply ``patch`` and ``updated_at`` to the record for ``email``.

        Returns the post-update record, or ``None`` if no record matched.
        ``email`` and ``password_hash`` are never written here.
        """
        with _store_errors("update_by_email"):
            row = await self._get_row(email)
            if row is None:
                return None
            for field, value in patch.changes().items():
                setattr(row, field, value)
            row.updated_at = updated_at
            await self._session.flush()
        return UserRecord.model_validate(row)
