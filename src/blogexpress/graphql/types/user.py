"""
User GraphQL type definitions
"""

from typing import TYPE_CHECKING, Annotated

import strawberry

if TYPE_CHECKING:
    from .post import Post


@strawberry.type
class User:
    """User type for GraphQL API."""

    id: strawberry.ID = strawberry.field(name="_id")
    email: str
    name: str
    role: str | None = None
    # Only createUser and updateUser fill this in
    password: str | None = None
    posts: list[Annotated["Post", strawberry.lazy(".post")]] = strawberry.field(
        default_factory=list
    )
    favorites: list[strawberry.ID] = strawberry.field(default_factory=list)


@strawberry.type
class AuthData:
    """Result of a successful login."""

    token: str
    user_id: strawberry.ID


@strawberry.type
class RoleData:
    """Result of a role change."""

    user_id: strawberry.ID
    role: str
