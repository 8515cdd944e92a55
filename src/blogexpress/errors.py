"""
Error types raised by BlogExpress resolvers.

Every error carries an HTTP-style ``code`` and, for validation failures, a
``data`` list of ``{"message": ...}`` entries. Both are exposed through
``extensions`` so the GraphQL layer reports them to the client verbatim.
"""

from __future__ import annotations

from typing import Any


class BlogExpressError(Exception):
    """Base class for all errors surfaced to GraphQL clients."""

    code: int | None = None
    default_message: str = "Something went wrong."

    def __init__(
        self,
        message: str | None = None,
        *,
        code: int | None = None,
        data: list[dict[str, str]] | None = None,
    ):
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        self.data = data
        super().__init__(self.message)

    @property
    def extensions(self) -> dict[str, Any]:
        extensions: dict[str, Any] = {"code": self.code}
        if self.data is not None:
            extensions["data"] = self.data
        return extensions


class AuthenticationRequired(BlogExpressError):
    code = 401
    default_message = "Not authenticated!"


class AuthorizationDenied(BlogExpressError):
    code = 401
    default_message = "Not authorized!"


class ValidationFailed(BlogExpressError):
    code = 422
    default_message = "Invalid input."

    def __init__(self, errors: list[dict[str, str]], message: str | None = None):
        super().__init__(message, data=errors)


class NotFound(BlogExpressError):
    code = 404
    default_message = "Not found."


class Conflict(BlogExpressError):
    code = 409
    default_message = "Already exists."


class TokenInvalidOrExpired(BlogExpressError):
    code = 400
    default_message = "Token is invalid or has expired!"


class PasswordMismatch(BlogExpressError):
    """Password and confirmation differ. Carries no code."""

    default_message = "Password does NOT match!"
