"""
Auth API routes — register, login, update.

Route prefix: /api/auth
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from api.dependencies import get_credential_service
from auth.models import AuthOutcome, ProfilePatch
from auth.service import CredentialService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


# ── Request schemas ────────────────────────────────────────────────────


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., max_length=128)
    first_name: Optional[str] = Field(None, alias="firstName", max_length=128)
    last_name: Optional[str] = Field(None, alias="lastName", max_length=128)


class LoginRequest(BaseModel):
    email: str
    password: str


class UpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: Optional[str] = Field(None, alias="firstName", max_length=128)
    last_name: Optional[str] = Field(None, alias="lastName", max_length=128)


def _respond(outcome: AuthOutcome) -> JSONResponse:
    if outcome.ok:
        return JSONResponse(status_code=outcome.status_code, content=outcome.data)
    return JSONResponse(status_code=outcome.status_code, content={"error": outcome.error})


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("/register")
async def register(
    req: RegisterRequest,
    service: CredentialService = Depends(get_credential_service),
) -> JSONResponse:
    """Register a new user."""
    outcome = await service.register(req.email, req.password, req.first_name, req.last_name)
    return _respond(outcome)


@router.post("/login")
async def login(
    req: LoginRequest,
    service: CredentialService = Depends(get_credential_service),
) -> JSONResponse:
    """Login with email + password."""
    return _respond(await service.login(req.email, req.password))


@router.put("/update")
async def update(
    req: UpdateRequest,
    email: Optional[str] = Header(None),
    service: CredentialService = Depends(get_credential_service),
) -> JSONResponse:
    """Update display attributes of the user named by the ``email`` header."""
    patch = ProfilePatch(first_name=req.first_name, last_name=req.last_name)
    return _respond(await service.update_profile(email, patch))
