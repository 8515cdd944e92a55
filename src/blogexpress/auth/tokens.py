"""JWT issuance and verification for session and password-reset tokens."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import jwt
from jwt.exceptions import InvalidTokenError

from ..config import Settings, settings
from ..logging import get_logger

logger = get_logger(__name__)


class TokenError(Exception):
    """Raised when a token cannot be verified."""

    pass


class TokenService:
    """Signs and verifies the two kinds of self-issued tokens.

    Session tokens carry ``userId``, ``email`` and ``role`` and are signed with
    the login secret. Reset tokens carry ``userId`` and ``email`` and are signed
    with the forgot-password secret, so one can never stand in for the other.
    """

    def __init__(
        self,
        login_secret: str,
        reset_secret: str,
        algorithm: str = "HS256",
        session_expiry_seconds: int = 3600,
        reset_expiry_seconds: int = 900,
    ):
        self.login_secret = login_secret
        self.reset_secret = reset_secret
        self.algorithm = algorithm
        self.session_expiry_seconds = session_expiry_seconds
        self.reset_expiry_seconds = reset_expiry_seconds

    @classmethod
    def from_settings(cls, config: Settings) -> TokenService:
        return cls(
            login_secret=config.login_token_secret,
            reset_secret=config.forgot_email_secret,
            algorithm=config.jwt_algorithm,
            session_expiry_seconds=config.login_token_expiry_seconds,
            reset_expiry_seconds=config.reset_token_expiry_seconds,
        )

    def _encode(self, claims: dict[str, Any], secret: str, expiry_seconds: int) -> str:
        now = datetime.now(UTC)
        payload = {
            **claims,
            "iat": now,
            "exp": now + timedelta(seconds=expiry_seconds),
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def _decode(self, token: str, secret: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"verify_exp": True, "verify_iat": True, "require": ["exp"]},
            )
        except InvalidTokenError as e:
            logger.warning("JWT token validation failed", error=str(e))
            raise TokenError("Invalid token") from e

    def issue_session_token(self, user_id: UUID, email: str, role: str) -> str:
        return self._encode(
            {"userId": str(user_id), "email": email, "role": role},
            self.login_secret,
            self.session_expiry_seconds,
        )

    def verify_session_token(self, token: str) -> dict[str, Any]:
        return self._decode(token, self.login_secret)

    def issue_reset_token(self, user_id: UUID, email: str) -> str:
        return self._encode(
            {"userId": str(user_id), "email": email},
            self.reset_secret,
            self.reset_expiry_seconds,
        )

    def verify_reset_token(self, token: str) -> dict[str, Any]:
        return self._decode(token, self.reset_secret)


def get_token_service() -> TokenService:
    """Build a token service from the current global settings."""
    return TokenService.from_settings(settings)
