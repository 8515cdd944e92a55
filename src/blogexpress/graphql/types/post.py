"""
Post GraphQL type definitions
"""

from typing import TYPE_CHECKING, Annotated

import strawberry

if TYPE_CHECKING:
    from .user import User


@strawberry.type
class Comment:
    """A comment embedded in a post."""

    id: strawberry.ID = strawberry.field(name="_id")
    user: strawberry.ID
    text: str


@strawberry.type
class Like:
    """A like or unlike entry embedded in a post."""

    id: strawberry.ID = strawberry.field(name="_id")
    user: strawberry.ID


@strawberry.type
class Post:
    """Post type for GraphQL API."""

    id: strawberry.ID = strawberry.field(name="_id")
    title: str
    content: str
    post_status: str
    created_at: str
    updated_at: str
    creator: Annotated["User", strawberry.lazy(".user")] | None = None
    comments: list[Comment] = strawberry.field(default_factory=list)
    likes: list[Like] = strawberry.field(default_factory=list)
    unlikes: list[Like] = strawberry.field(default_factory=list)


@strawberry.type
class PostStatusData:
    post_id: strawberry.ID
    status: str


@strawberry.type
class CommentData:
    """A freshly added comment."""

    id: strawberry.ID = strawberry.field(name="_id")
    user_id: strawberry.ID
    post_id: strawberry.ID
    text: str


@strawberry.type
class DeletedComment:
    post_id: strawberry.ID
    comment_id: strawberry.ID


@strawberry.type
class LikeData:
    """The like/unlike entry that a toggle added or removed."""

    id: strawberry.ID = strawberry.field(name="_id")
    post_id: strawberry.ID
