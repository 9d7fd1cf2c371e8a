"""
FastAPI dependencies (shared across routes).
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from auth.service import CredentialService
from database.session import get_db_session
from database.users import UserStore


async def db_session(session: AsyncSession = Depends(get_db_session)) -> AsyncGenerator[AsyncSession, None]:
    """Re-export so routes import from a single place."""
    yield session


async def get_user_store(session: AsyncSession = Depends(db_session)) -> UserStore:
    return UserStore(session)


async def get_credential_service(
    request: Request,
    store: UserStore = Depends(get_user_store),
) -> CredentialService:
    """
    Build a per-request service around the request's store session and the
    process-wide hasher / issuer created at startup.
    """
    return CredentialService(
        store=store,
        hasher=request.app.state.password_hasher,
        issuer=request.app.state.token_issuer,
    )
