from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

import strawberry
from sqlalchemy import delete, select
from sqlalchemy.orm import selectinload

from ...database.connection import get_async_session
from ...dbmodels import PostComments, PostLikes, Posts, PostUnlikes, UserFavorites, Users
from ...errors import AuthenticationRequired, AuthorizationDenied, NotFound
from ...logging import get_logger
from ..access_control import Action, authorize, get_auth_context_from_info, require_authenticated
from ..validation import parse_id, validate_post_fields

if TYPE_CHECKING:
    from ..mutations.root import CommentInputData, PostInputData
    from ..types.post import (
        CommentData,
        DeletedComment,
        LikeData,
        Post,
        PostStatusData,
    )
    from ..types.user import User

logger = get_logger(__name__)

PUBLIC_STATUS = "public"

POST_NOT_FOUND = "No post founded!"
POST_DOES_NOT_EXIST = "Post does not exist!"

POST_LOAD_OPTIONS = (
    selectinload(Posts.creator),
    selectinload(Posts.comments),
    selectinload(Posts.likes),
    selectinload(Posts.unlikes),
)


def iso_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC. SQLite hands stored timestamps back without an offset."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat()


def creator_to_type(user: Users) -> User:
    """Public projection of a post's creator: no password, no nested posts."""
    from ..types.user import User as UserType

    return UserType(
        id=strawberry.ID(str(user.id)),
        email=user.email,
        name=user.name,
        role=user.role,
    )


def post_to_type(post: Posts, creator: Users | None = None) -> Post:
    """
    Convert a Posts row into the GraphQL type.

    ``comments``, ``likes`` and ``unlikes`` must already be loaded. The
    creator is only rendered when passed explicitly.
    """
    from ..types.post import Comment, Like
    from ..types.post import Post as PostType

    return PostType(
        id=strawberry.ID(str(post.id)),
        title=post.title,
        content=post.content,
        post_status=post.post_status,
        created_at=iso_timestamp(post.created_at),
        updated_at=iso_timestamp(post.updated_at),
        creator=creator_to_type(creator) if creator is not None else None,
        comments=[
            Comment(id=strawberry.ID(str(c.id)), user=strawberry.ID(str(c.user_id)), text=c.text)
            for c in post.comments
        ],
        likes=[
            Like(id=strawberry.ID(str(like.id)), user=strawberry.ID(str(like.user_id)))
            for like in post.likes
        ],
        unlikes=[
            Like(id=strawberry.ID(str(unlike.id)), user=strawberry.ID(str(unlike.user_id)))
            for unlike in post.unlikes
        ],
    )


async def _load_post(session, post_id) -> Posts | None:
    result = await session.execute(
        select(Posts).where(Posts.id == post_id).options(*POST_LOAD_OPTIONS)
    )
    return result.scalar_one_or_none()


async def _load_posts(session, *conditions) -> list[Post]:
    stmt = select(Posts).options(*POST_LOAD_OPTIONS).order_by(Posts.created_at)
    if conditions:
        stmt = stmt.where(*conditions)
    result = await session.execute(stmt)
    return [post_to_type(post, creator=post.creator) for post in result.scalars().all()]


# Mutation resolvers
async def create_post(info: strawberry.Info, post_input: PostInputData) -> Post:
    """Create a post owned by the caller."""
    auth_context = require_authenticated(info)
    validate_post_fields(post_input.title, post_input.content, post_input.post_status)

    async with get_async_session() as session:
        user = await session.get(Users, auth_context.user_id)
        if user is None:
            raise AuthorizationDenied("Invalid user.")

        post = Posts(
            title=post_input.title,
            content=post_input.content,
            post_status=post_input.post_status,
            creator=user,
            comments=[],
            likes=[],
            unlikes=[],
        )
        session.add(post)
        await session.flush()

        logger.info("Post created", post_id=str(post.id), user_id=str(user.id))

        return post_to_type(post, creator=user)


async def update_post(info: strawberry.Info, id: str, post_input: PostInputData) -> Post:
    """
    Replace a post's title, content and status.

    Only the creator may update a post.
    """
    auth_context = require_authenticated(info)
    validate_post_fields(post_input.title, post_input.content, post_input.post_status)
    post_id = parse_id(id, POST_NOT_FOUND)

    async with get_async_session() as session:
        post = await _load_post(session, post_id)
        if post is None:
            raise NotFound(POST_NOT_FOUND)

        user = await session.get(Users, auth_context.user_id)
        if user is None:
            raise AuthorizationDenied("Invalid user.")

        if not authorize(auth_context, Action.UPDATE_POST, post):
            logger.info("Post update denied", post_id=id, user_id=str(auth_context.user_id))
            raise AuthorizationDenied("You do NOT have access to update this post!")

        post.title = post_input.title
        post.content = post_input.content
        post.post_status = post_input.post_status
        post.creator = user
        await session.flush()

        logger.info("Post updated", post_id=id, user_id=str(user.id))

        return post_to_type(post, creator=user)


async def delete_post(info: strawberry.Info, id: str) -> str:
    """
    Delete a post.

    Admins may delete any post; other users only their own.
    """
    auth_context = require_authenticated(info)
    post_id = parse_id(id, POST_NOT_FOUND)

    async with get_async_session() as session:
        post = await session.get(Posts, post_id)
        if post is None:
            raise NotFound(POST_NOT_FOUND)

        if not authorize(auth_context, Action.DELETE_POST, post):
            logger.info("Post deletion denied", post_id=id, user_id=str(auth_context.user_id))
            raise AuthorizationDenied()

        await session.delete(post)

        logger.info(
            "Post deleted",
            post_id=id,
            user_id=str(auth_context.user_id),
            as_admin=auth_context.is_admin,
        )

    return id


async def update_post_status(info: strawberry.Info, id: str, status: str) -> PostStatusData:
    auth_context = require_authenticated(info)
    post_id = parse_id(id, POST_NOT_FOUND)

    async with get_async_session() as session:
        post = await session.get(Posts, post_id)
        if post is None:
            raise NotFound(POST_NOT_FOUND)

        if not authorize(auth_context, Action.CHANGE_POST_STATUS, post):
            raise AuthorizationDenied()

        post.post_status = status

    from ..types.post import PostStatusData as PostStatusDataType

    return PostStatusDataType(post_id=strawberry.ID(str(post_id)), status=status)


async def add_comment(info: strawberry.Info, comment_input: CommentInputData) -> CommentData:
    auth_context = require_authenticated(info)
    post_id = parse_id(comment_input.post_id, POST_DOES_NOT_EXIST)

    async with get_async_session() as session:
        if await session.get(Posts, post_id) is None:
            raise NotFound(POST_DOES_NOT_EXIST)

        comment = PostComments(
            id=uuid4(),
            post_id=post_id,
            user_id=auth_context.user_id,
            text=comment_input.text,
        )
        session.add(comment)
        await session.flush()

    from ..types.post import CommentData as CommentDataType

    return CommentDataType(
        id=strawberry.ID(str(comment.id)),
        user_id=strawberry.ID(str(auth_context.user_id)),
        post_id=strawberry.ID(str(post_id)),
        text=comment_input.text,
    )


async def delete_comment(info: strawberry.Info, post_id: str, comment_id: str) -> DeletedComment:
    """
    Remove a comment from a post.

    Only the comment's author may remove it, even the post owner may not.
    """
    auth_context = require_authenticated(info)
    post_uuid = parse_id(post_id, POST_DOES_NOT_EXIST)
    comment_uuid = parse_id(comment_id, "This comment does not exist!")

    async with get_async_session() as session:
        result = await session.execute(
            select(Posts).where(Posts.id == post_uuid).options(selectinload(Posts.comments))
        )
        post = result.scalar_one_or_none()
        if post is None:
            raise NotFound(POST_DOES_NOT_EXIST)

        comment = next((c for c in post.comments if c.id == comment_uuid), None)
        if comment is None:
            raise NotFound("This comment does not exist!")

        if not authorize(auth_context, Action.DELETE_COMMENT, comment):
            raise AuthorizationDenied("Not authorized.")

        post.comments.remove(comment)

    from ..types.post import DeletedComment as DeletedCommentType

    return DeletedCommentType(
        post_id=strawberry.ID(str(post_uuid)), comment_id=strawberry.ID(str(comment_uuid))
    )


async def _toggle_reaction(
    info: strawberry.Info,
    post_id: str,
    reaction: type[PostLikes] | type[PostUnlikes],
    opposite: type[PostLikes] | type[PostUnlikes],
) -> LikeData:
    """
    Toggle the caller's entry in one reaction collection of a post.

    Absent: remove any entry in the opposite collection, then add one here.
    Present: remove it. Returns the id of the entry that was added or removed.
    """
    auth_context = require_authenticated(info)
    post_uuid = parse_id(post_id, POST_DOES_NOT_EXIST)

    async with get_async_session() as session:
        if await session.get(Posts, post_uuid) is None:
            raise NotFound(POST_DOES_NOT_EXIST)

        result = await session.execute(
            select(reaction).where(
                reaction.post_id == post_uuid, reaction.user_id == auth_context.user_id
            )
        )
        existing = result.scalar_one_or_none()

        if existing is None:
            await session.execute(
                delete(opposite).where(
                    opposite.post_id == post_uuid, opposite.user_id == auth_context.user_id
                )
            )
            entry = reaction(id=uuid4(), post_id=post_uuid, user_id=auth_context.user_id)
            session.add(entry)
            await session.flush()
            entry_id = entry.id
            added = True
        else:
            entry_id = existing.id
            await session.delete(existing)
            added = False

        logger.info(
            "Post reaction toggled",
            post_id=post_id,
            user_id=str(auth_context.user_id),
            kind=reaction.__tablename__,
            added=added,
        )

    from ..types.post import LikeData as LikeDataType

    return LikeDataType(id=strawberry.ID(str(entry_id)), post_id=strawberry.ID(str(post_uuid)))


async def like_post(info: strawberry.Info, post_id: str) -> LikeData:
    return await _toggle_reaction(info, post_id, PostLikes, PostUnlikes)


async def unlike_post(info: strawberry.Info, post_id: str) -> LikeData:
    return await _toggle_reaction(info, post_id, PostUnlikes, PostLikes)


async def favorite_post(info: strawberry.Info, post_id: str) -> str:
    """Add the post to the caller's favorites, or remove it if already there."""
    auth_context = require_authenticated(info)
    post_uuid = parse_id(post_id, POST_DOES_NOT_EXIST)

    async with get_async_session() as session:
        result = await session.execute(
            select(Users)
            .where(Users.id == auth_context.user_id)
            .options(selectinload(Users.favorites))
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFound("User does not exist!")

        favorite_ids = {f.post_id for f in user.favorites}
        if post_uuid in favorite_ids:
            user.favorites = [f for f in user.favorites if f.post_id != post_uuid]
        else:
            user.favorites.append(UserFavorites(post_id=post_uuid))

    return post_id


# Query resolvers
async def resolve_all_posts(info: strawberry.Info) -> list[Post]:
    """Every post. Admins and any authenticated caller only."""
    auth_context = get_auth_context_from_info(info)
    if not authorize(auth_context, Action.LIST_ALL_POSTS):
        raise AuthorizationDenied("You do not have access to all posts!")

    async with get_async_session() as session:
        return await _load_posts(session)


async def resolve_public_posts(info: strawberry.Info) -> list[Post]:
    """Posts whose status is exactly "public"; other casings are not matched."""
    _ = info
    async with get_async_session() as session:
        return await _load_posts(session, Posts.post_status == PUBLIC_STATUS)


async def resolve_private_posts(info: strawberry.Info) -> list[Post]:
    """The caller's own posts, whatever their status."""
    auth_context = require_authenticated(info)

    async with get_async_session() as session:
        if await session.get(Users, auth_context.user_id) is None:
            raise NotFound(POST_NOT_FOUND)

        return await _load_posts(session, Posts.creator_id == auth_context.user_id)


async def resolve_post_by_id(info: strawberry.Info, id: str) -> Post:
    """A single post. Private posts need an authenticated caller."""
    auth_context = get_auth_context_from_info(info)
    post_id = parse_id(id, POST_NOT_FOUND)

    async with get_async_session() as session:
        post = await _load_post(session, post_id)
        if post is None:
            raise NotFound(POST_NOT_FOUND)

        if not authorize(auth_context, Action.VIEW_POST, post):
            raise AuthenticationRequired()

        return post_to_type(post, creator=post.creator)


__all__ = [
    "add_comment",
    "create_post",
    "delete_comment",
    "delete_post",
    "favorite_post",
    "like_post",
    "post_to_type",
    "resolve_all_posts",
    "resolve_post_by_id",
    "resolve_private_posts",
    "resolve_public_posts",
    "unlike_post",
    "update_post",
    "update_post_status",
]
