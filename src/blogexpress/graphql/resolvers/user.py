from __future__ import annotations

import time
from typing import TYPE_CHECKING

import strawberry
from sqlalchemy import delete, select
from sqlalchemy.orm import selectinload

from ...auth.passwords import hash_password, verify_password
from ...auth.tokens import TokenError, get_token_service
from ...database.connection import get_async_session
from ...dbmodels import Posts, Users
from ...errors import (
    AuthorizationDenied,
    Conflict,
    NotFound,
    PasswordMismatch,
    TokenInvalidOrExpired,
)
from ...logging import get_logger
from ...mailer import get_mailer
from ..access_control import Action, authorize, require_authenticated
from ..validation import parse_id, validate_user_fields
from .post import post_to_type

if TYPE_CHECKING:
    from ..mutations.root import UserInputData
    from ..types.user import AuthData, RoleData, User

logger = get_logger(__name__)

USER_NOT_FOUND = "This user does not exist"


def _now_ms() -> int:
    return int(time.time() * 1000)


def reset_expiry_marker(now_ms: int | None = None) -> int:
    """Expiry value stored alongside a reset token.

    The current timestamp is multiplied rather than offset by fifteen minutes,
    so the stored window never closes. The reset JWT expiry is the effective
    15-minute bound.
    """
    return (now_ms if now_ms is not None else _now_ms()) * 60 * 15


def user_to_type(user: Users, *, include_password: bool = False) -> User:
    """Convert a Users row into the GraphQL type.

    Requires ``posts`` (with their comments, likes and unlikes) and
    ``favorites`` to have been eagerly loaded.
    """
    from ..types.user import User as UserType

    return UserType(
        id=strawberry.ID(str(user.id)),
        email=user.email,
        name=user.name,
        role=user.role,
        password=user.password if include_password else None,
        posts=[post_to_type(p) for p in user.posts],
        favorites=[strawberry.ID(str(f.post_id)) for f in user.favorites],
    )


async def _find_user_by_email(session, email: str) -> Users | None:
    result = await session.execute(select(Users).where(Users.email == email))
    return result.scalar_one_or_none()


USER_LOAD_OPTIONS = (
    selectinload(Users.posts).selectinload(Posts.comments),
    selectinload(Users.posts).selectinload(Posts.likes),
    selectinload(Users.posts).selectinload(Posts.unlikes),
    selectinload(Users.favorites),
)


def _user_query(user_id):
    return select(Users).where(Users.id == user_id).options(*USER_LOAD_OPTIONS)


async def create_user(info: strawberry.Info, user_input: UserInputData) -> User:
    """
    Register a new account.

    The returned record includes the password hash.
    """
    _ = info
    email, name = user_input.email, user_input.name
    password, confirm_password = user_input.password, user_input.confirm_password

    validate_user_fields(email, name, password)

    async with get_async_session() as session:
        if await _find_user_by_email(session, email) is not None:
            raise Conflict("User exists already!")

        if password != confirm_password:
            raise PasswordMismatch()

        hashed_pw = await hash_password(password)

        user = Users(email=email, name=name, password=hashed_pw, posts=[], favorites=[])
        session.add(user)
        await session.flush()

        logger.info("User created", user_id=str(user.id))

        return user_to_type(user, include_password=True)


async def login(info: strawberry.Info, email: str, password: str) -> AuthData:
    """Verify credentials and issue a one-hour session token."""
    _ = info
    async with get_async_session() as session:
        user = await _find_user_by_email(session, email)

    if user is None:
        raise NotFound(USER_NOT_FOUND)

    if not await verify_password(password, user.password):
        logger.info("Login rejected", user_id=str(user.id))
        raise AuthorizationDenied("Password is incorrect.")

    token = get_token_service().issue_session_token(user.id, user.email, user.role)

    from ..types.user import AuthData as AuthDataType

    return AuthDataType(token=token, user_id=strawberry.ID(str(user.id)))


async def resolve_current_user(info: strawberry.Info) -> User:
    auth_context = require_authenticated(info)

    async with get_async_session() as session:
        result = await session.execute(_user_query(auth_context.user_id))
        user = result.scalar_one_or_none()

        if user is None:
            raise NotFound(USER_NOT_FOUND)

        return user_to_type(user)


async def update_user(info: strawberry.Info, user_input: UserInputData) -> User:
    """
    Overwrite the caller's email, name and password.

    Upserts on the caller's id. The returned record includes the password
    hash and the populated post list.
    """
    auth_context = require_authenticated(info)

    email, name = user_input.email, user_input.name
    password, confirm_password = user_input.password, user_input.confirm_password

    validate_user_fields(email, name, password)

    if password != confirm_password:
        raise PasswordMismatch()

    hashed_pw = await hash_password(password)

    async with get_async_session() as session:
        taken = await session.execute(
            select(Users.id).where(Users.email == email, Users.id != auth_context.user_id)
        )
        if taken.scalar_one_or_none() is not None:
            raise Conflict("User exists already!")

        result = await session.execute(_user_query(auth_context.user_id))
        user = result.scalar_one_or_none()

        if user is None:
            user = Users(id=auth_context.user_id, posts=[], favorites=[])
            session.add(user)

        user.email = email
        user.name = name
        user.password = hashed_pw
        await session.flush()

        logger.info("User updated", user_id=str(user.id))

        return user_to_type(user, include_password=True)


async def _set_role(user_id, role: str) -> RoleData:
    from ..types.user import RoleData as RoleDataType

    async with get_async_session() as session:
        user = await session.get(Users, user_id)
        if user is None:
            raise NotFound(USER_NOT_FOUND)

        user.role = role.upper()
        await session.flush()

        return RoleDataType(user_id=strawberry.ID(str(user.id)), role=user.role)


async def update_user_role(info: strawberry.Info, role: str) -> RoleData:
    """Assign the caller any role, with no further check."""
    auth_context = require_authenticated(info)

    role_data = await _set_role(auth_context.user_id, role)
    logger.info("User changed own role", user_id=str(auth_context.user_id), role=role_data.role)
    return role_data


async def admin_update_roles(info: strawberry.Info, user_id: str, role: str) -> RoleData:
    """Change another user's role. Admin only."""
    auth_context = require_authenticated(info)

    if not authorize(auth_context, Action.MANAGE_ROLES):
        logger.info("Role change denied", user_id=str(auth_context.user_id), target=user_id)
        raise AuthorizationDenied()

    role_data = await _set_role(parse_id(user_id, USER_NOT_FOUND), role)
    logger.info(
        "Admin changed user role",
        user_id=str(auth_context.user_id),
        target=user_id,
        role=role_data.role,
    )
    return role_data


async def delete_user(info: strawberry.Info, id: str) -> str:
    """
    Delete an account and every post it created.

    Admins may delete anyone; other users only themselves.
    """
    auth_context = require_authenticated(info)
    target_id = parse_id(id, USER_NOT_FOUND)

    async with get_async_session() as session:
        user = await session.get(Users, target_id)
        if user is None:
            raise NotFound(USER_NOT_FOUND)

        if not authorize(auth_context, Action.DELETE_USER, user):
            logger.info("User deletion denied", user_id=str(auth_context.user_id), target=id)
            raise AuthorizationDenied()

        await session.execute(delete(Posts).where(Posts.creator_id == target_id))
        await session.delete(user)

        logger.info("User deleted", user_id=str(auth_context.user_id), target=id)

    return id


async def forgot_password(info: strawberry.Info, email: str) -> str:
    """Store a reset token on the account and email the reset link."""
    _ = info
    tokens = get_token_service()

    async with get_async_session() as session:
        user = await _find_user_by_email(session, email)
        if user is None:
            raise NotFound(USER_NOT_FOUND)

        token = tokens.issue_reset_token(user.id, user.email)
        user.password_reset_token = token
        user.password_reset_expires = reset_expiry_marker()

    await get_mailer().send_password_reset(email, token)
    logger.info("Password reset requested", user_id=str(user.id))

    return email


async def reset_password(
    info: strawberry.Info, token: str, password: str, confirm_password: str
) -> str:
    """Replace the password of the account holding a valid reset token."""
    _ = info
    try:
        get_token_service().verify_reset_token(token)
    except TokenError as e:
        raise TokenInvalidOrExpired() from e

    async with get_async_session() as session:
        result = await session.execute(
            select(Users).where(
                Users.password_reset_token == token,
                Users.password_reset_expires > _now_ms(),
            )
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise TokenInvalidOrExpired()

        if password != confirm_password:
            raise PasswordMismatch()

        user.password = await hash_password(password)
        user.password_reset_token = None
        user.password_reset_expires = None

        logger.info("Password reset completed", user_id=str(user.id))

        return user.email


async def resolve_all_users(info: strawberry.Info) -> list[User]:
    require_authenticated(info)

    async with get_async_session() as session:
        result = await session.execute(
            select(Users).options(*USER_LOAD_OPTIONS).order_by(Users.created_at)
        )
        return [user_to_type(user) for user in result.scalars().all()]


__all__ = [
    "admin_update_roles",
    "create_user",
    "delete_user",
    "forgot_password",
    "login",
    "reset_password",
    "resolve_all_users",
    "resolve_current_user",
    "update_user",
    "update_user_role",
    "user_to_type",
]
