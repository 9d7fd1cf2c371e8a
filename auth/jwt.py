"""
JWT token issuance.

Tokens are HS256 JWTs whose only claim is ``{"user": {"id": <user_id>}}``.
The secret key is loaded from ``config.jwt_secret`` (env var: ``JWT_SECRET``).
No ``iat``/``exp`` claims are added, so a token for a given user is stable
for as long as the secret is.
"""

from __future__ import annotations

import jwt

from auth.exceptions import ConfigurationError


class TokenIssuer:
    """Signs identity assertions with a process-wide shared secret."""

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        if not secret or not secret.strip():
            raise ConfigurationError("JWT_SECRET is not set; refusing to start")
        self._secret = secret
        self.algorithm = algorithm

    def issue(self, user_id: str) -> str:
        """Create a signed token binding ``user_id``."""
        payload = {"user": {"id": str(user_id)}}
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)
