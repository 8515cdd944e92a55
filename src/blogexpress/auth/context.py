"""Authentication context for request handling."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

ADMIN_ROLE = "admin"


@dataclass
class AuthContext:
    """Runtime identity of the caller for a single request."""

    user_id: UUID | None
    role: str = ""
    email: str | None = None
    token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        """Check if the request is authenticated."""
        return self.user_id is not None

    @property
    def is_admin(self) -> bool:
        """Role comparison is case-insensitive."""
        return (self.role or "").lower() == ADMIN_ROLE

    @classmethod
    def anonymous(cls) -> AuthContext:
        return cls(user_id=None)
