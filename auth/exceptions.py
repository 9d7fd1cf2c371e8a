"""
Failures raised by the credential components.

Client errors carry the HTTP status and the short reason returned to the
caller.  Everything else is an internal failure and is reported as a
generic 500 by the credential service.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base class for all credential-lifecycle failures."""

    status_code: int = 500
    reason: str = "Internal server error"


class ClientError(AuthError):
    """A failure caused by the caller's input or state."""

    status_code = 400


class DuplicateEmail(ClientError):
    """Registration attempted for an email that already has a record."""

    reason = "Email id already exists"


class MissingIdentity(ClientError):
    """Profile update arrived without the identifying ``email`` header."""

    reason = "Email not found in the request headers"


class UserNotFound(ClientError):
    status_code = 404
    reason = "User not found"


class InvalidCredentials(ClientError):
    # Same status as UserNotFound so callers cannot tell the two apart.
    status_code = 404
    reason = "Wrong password"


class HashFormatError(AuthError):
    """Stored password hash is not a well-formed bcrypt string."""


class StoreUnavailableError(AuthError):
    """The user store could not be reached or timed out."""


class DuplicateKeyError(AuthError):
    """The user store rejected an insert on its unique email index."""


class ConfigurationError(RuntimeError):
    """Process configuration is unusable.  Fatal at startup."""
