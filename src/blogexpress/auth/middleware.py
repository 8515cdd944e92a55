"""Resolve the identity context from the Authorization header."""

from __future__ import annotations

from uuid import UUID

from fastapi import Header

from ..logging import get_logger
from .context import AuthContext
from .tokens import TokenError, get_token_service

logger = get_logger(__name__)


async def get_auth_context(authorization: str | None = Header(None)) -> AuthContext:
    """
    Build the AuthContext for a request.

    A missing, malformed, expired or forged token never fails the request; it
    produces an unauthenticated context and the resolvers decide what that
    caller may do.

    Args:
        authorization: Authorization header (Bearer token)
    """
    if not authorization:
        return AuthContext.anonymous()

    if not authorization.startswith("Bearer "):
        logger.warning("Invalid authorization format received")
        return AuthContext.anonymous()

    token = authorization[7:]  # Remove "Bearer " prefix
    if not token:
        logger.warning("Empty token provided")
        return AuthContext.anonymous()

    try:
        claims = get_token_service().verify_session_token(token)
    except TokenError:
        return AuthContext.anonymous()

    raw_user_id = claims.get("userId")
    try:
        user_id = UUID(str(raw_user_id))
    except ValueError:
        logger.warning("Token carries a malformed userId", user_id=raw_user_id)
        return AuthContext.anonymous()

    return AuthContext(
        user_id=user_id,
        role=str(claims.get("role") or ""),
        email=claims.get("email"),
        token=token,
    )
