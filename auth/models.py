"""
Typed records passed between the user store, the credential service and
the HTTP layer.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class UserRecord(BaseModel):
    """A persisted user as seen by the credential service."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str = Field(..., min_length=1)
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    password_hash: str = Field(..., min_length=1)
    created_at: datetime
    updated_at: Optional[datetime] = None


class ProfilePatch(BaseModel):
    """Display attributes a caller may change.  ``None`` means untouched."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None

    def changes(self) -> Dict[str, str]:
        return {k: v for k, v in self.model_dump().items() if v is not None}


class AuthOutcome(BaseModel):
    """Result of one credential operation, ready for the HTTP layer."""

    status: Literal["success", "error"]
    status_code: int = 200
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "success"

    @classmethod
    def success(cls, **data: Any) -> "AuthOutcome":
        return cls(status="success", status_code=200, data=data)

    @classmethod
    def failure(cls, status_code: int, error: str) -> "AuthOutcome":
        return cls(status="error", status_code=status_code, error=error)
