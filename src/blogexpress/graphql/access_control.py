"""
Shared access control logic for GraphQL resolvers
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any
from uuid import UUID

import strawberry

from ..auth.context import AuthContext
from ..errors import AuthenticationRequired
from ..logging import get_logger

if TYPE_CHECKING:
    from ..dbmodels import PostComments, Posts, Users

logger = get_logger(__name__)

PRIVATE_STATUS = "private"


class Action(Enum):
    """Operations guarded by the authorization policy."""

    VIEW_POST = "view_post"
    LIST_ALL_POSTS = "list_all_posts"
    UPDATE_POST = "update_post"
    CHANGE_POST_STATUS = "change_post_status"
    DELETE_POST = "delete_post"
    DELETE_COMMENT = "delete_comment"
    DELETE_USER = "delete_user"
    MANAGE_ROLES = "manage_roles"


def get_auth_context_from_info(info: strawberry.Info) -> AuthContext:
    """
    Extract the auth context from the GraphQL info object.

    Falls back to an anonymous context when the request carried none.
    """
    context = info.context
    auth_context = context.get("auth") if isinstance(context, dict) else None
    if auth_context is None:
        return AuthContext.anonymous()
    return auth_context


def require_authenticated(info: strawberry.Info) -> AuthContext:
    """Return the caller's context, or raise if the caller is anonymous."""
    auth_context = get_auth_context_from_info(info)
    if not auth_context.is_authenticated:
        raise AuthenticationRequired()
    return auth_context


def owner_id_of(resource: Posts | PostComments | Users | Any) -> UUID | None:
    """Return the user id that owns a resource."""
    for attr in ("creator_id", "user_id"):
        owner = getattr(resource, attr, None)
        if owner is not None:
            return owner
    return getattr(resource, "id", None)


def authorize(actor: AuthContext | None, action: Action, resource: Any = None) -> bool:
    """
    Decide whether ``actor`` may perform ``action`` on ``resource``.

    Rules:
    - VIEW_POST: anyone, unless the post status is exactly "private", which
      needs an authenticated caller.
    - LIST_ALL_POSTS: admins, or any authenticated caller.
    - UPDATE_POST / CHANGE_POST_STATUS: the post creator only.
    - DELETE_POST / DELETE_USER: admins, or the owner (creator / the account itself).
    - DELETE_COMMENT: the comment author only; owning the post is not enough.
    - MANAGE_ROLES: admins only.

    Returns:
        True if the action is allowed, False otherwise
    """
    if actor is None:
        actor = AuthContext.anonymous()

    if action is Action.VIEW_POST:
        return resource.post_status != PRIVATE_STATUS or actor.is_authenticated

    if action is Action.LIST_ALL_POSTS:
        return actor.is_admin or actor.is_authenticated

    if not actor.is_authenticated:
        return False

    is_owner = owner_id_of(resource) == actor.user_id if resource is not None else False

    if action in (Action.UPDATE_POST, Action.CHANGE_POST_STATUS, Action.DELETE_COMMENT):
        return is_owner

    if action in (Action.DELETE_POST, Action.DELETE_USER):
        return actor.is_admin or is_owner

    if action is Action.MANAGE_ROLES:
        return actor.is_admin

    logger.warning("Unknown action passed to authorize", action=str(action))
    return False
