"""Authentication and authorization system for BlogExpress."""

from .context import AuthContext
from .middleware import get_auth_context
from .tokens import TokenError, TokenService, get_token_service

__all__ = [
    "AuthContext",
    "TokenError",
    "TokenService",
    "get_auth_context",
    "get_token_service",
]
