"""
Integration tests for post resolvers against a throwaway SQLite database
"""

import uuid

import pytest
import pytest_asyncio
from sqlalchemy import select

from blogexpress.database.connection import get_async_session
from blogexpress.dbmodels import PostLikes, PostUnlikes, UserFavorites
from blogexpress.errors import (
    AuthenticationRequired,
    AuthorizationDenied,
    NotFound,
    ValidationFailed,
)
from blogexpress.graphql.mutations.root import CommentInputData, PostInputData
from blogexpress.graphql.resolvers.post import (
    add_comment,
    create_post,
    delete_comment,
    delete_post,
    favorite_post,
    like_post,
    resolve_all_posts,
    resolve_post_by_id,
    resolve_private_posts,
    resolve_public_posts,
    unlike_post,
    update_post,
    update_post_status,
)
from blogexpress.graphql.resolvers.user import login, resolve_current_user

pytestmark = [pytest.mark.asyncio, pytest.mark.integration, pytest.mark.usefixtures("database")]


def post_input(title="T", content="C", post_status="public"):
    return PostInputData(title=title, content=content, post_status=post_status)


@pytest_asyncio.fixture
async def alice(register, user_info):
    user_id = await register("a@x.com", name="Alice")
    return user_info(user_id)


@pytest_asyncio.fixture
async def bob(register, user_info):
    user_id = await register("b@x.com", name="Bob")
    return user_info(user_id)


def caller_id(info) -> str:
    return str(info.context["auth"].user_id)


class TestConcreteScenario:
    async def test_register_login_create_view_and_foreign_delete(
        self, register, make_info, anonymous_info, user_info
    ):
        a_id = await register("a@x.com", password="secret")
        auth = await login(anonymous_info, "a@x.com", "secret")
        assert auth.user_id == str(a_id)

        post = await create_post(user_info(a_id), post_input("T", "C", "public"))
        assert post.creator.id == str(a_id)

        fetched = await resolve_post_by_id(make_info(), post.id)
        assert fetched.title == "T"

        b_id = await register("b@x.com")
        with pytest.raises(AuthorizationDenied) as exc_info:
            await delete_post(user_info(b_id), post.id)
        assert exc_info.value.code == 401


class TestCreatePost:
    async def test_requires_authentication(self, anonymous_info):
        with pytest.raises(AuthenticationRequired):
            await create_post(anonymous_info, post_input())

    async def test_missing_fields(self, alice):
        with pytest.raises(ValidationFailed) as exc_info:
            await create_post(alice, post_input(title=""))
        assert exc_info.value.data == [{"message": "Please fill all inputs!"}]

    async def test_unknown_caller(self, user_info):
        with pytest.raises(AuthorizationDenied) as exc_info:
            await create_post(user_info(uuid.uuid4()), post_input())
        assert exc_info.value.message == "Invalid user."

    async def test_post_joins_creator_collection(self, alice):
        post = await create_post(alice, post_input())

        assert post.created_at
        assert post.updated_at
        assert post.comments == post.likes == post.unlikes == []
        me = await resolve_current_user(alice)
        assert [p.id for p in me.posts] == [post.id]

    async def test_timestamps_match_when_read_back(self, alice, make_info):
        post = await create_post(alice, post_input())

        fetched = await resolve_post_by_id(make_info(), post.id)

        assert fetched.created_at == post.created_at
        assert fetched.updated_at == post.updated_at
        assert post.created_at.endswith("+00:00")


class TestUpdatePost:
    async def test_owner_updates(self, alice):
        post = await create_post(alice, post_input())

        updated = await update_post(alice, post.id, post_input("T2", "C2", "private"))

        assert (updated.title, updated.content, updated.post_status) == ("T2", "C2", "private")
        assert updated.creator.id == caller_id(alice)
        assert updated.creator.role == "USER"

    async def test_other_user_denied(self, alice, bob):
        post = await create_post(alice, post_input())
        with pytest.raises(AuthorizationDenied) as exc_info:
            await update_post(bob, post.id, post_input("X", "Y", "public"))
        assert exc_info.value.message == "You do NOT have access to update this post!"

    async def test_missing_post(self, alice):
        with pytest.raises(NotFound) as exc_info:
            await update_post(alice, str(uuid.uuid4()), post_input())
        assert exc_info.value.message == "No post founded!"


class TestPostListing:
    async def test_public_posts_exact_status(self, alice):
        await create_post(alice, post_input("pub", post_status="public"))
        await create_post(alice, post_input("cap", post_status="Public"))
        await create_post(alice, post_input("priv", post_status="private"))

        posts = await resolve_public_posts(alice)

        assert [p.title for p in posts] == ["pub"]
        assert posts[0].creator.name == "Alice"

    async def test_private_posts_are_callers_own(self, alice, bob):
        await create_post(alice, post_input("a1", post_status="public"))
        await create_post(alice, post_input("a2", post_status="private"))
        await create_post(bob, post_input("b1", post_status="private"))

        posts = await resolve_private_posts(alice)

        assert sorted(p.title for p in posts) == ["a1", "a2"]

    async def test_private_posts_require_authentication(self, anonymous_info):
        with pytest.raises(AuthenticationRequired):
            await resolve_private_posts(anonymous_info)

    async def test_all_posts(self, alice, bob, anonymous_info):
        await create_post(alice, post_input("a1"))
        await create_post(bob, post_input("b1", post_status="private"))

        assert len(await resolve_all_posts(bob)) == 2
        with pytest.raises(AuthorizationDenied) as exc_info:
            await resolve_all_posts(anonymous_info)
        assert exc_info.value.message == "You do not have access to all posts!"


class TestGetPost:
    async def test_private_post_needs_authentication(self, alice, bob, anonymous_info):
        post = await create_post(alice, post_input(post_status="private"))

        with pytest.raises(AuthenticationRequired):
            await resolve_post_by_id(anonymous_info, post.id)

        fetched = await resolve_post_by_id(bob, post.id)
        assert fetched.creator.email == "a@x.com"

    @pytest.mark.parametrize("post_id", [str(uuid.uuid4()), "not-a-uuid"])
    async def test_missing_post(self, anonymous_info, post_id):
        with pytest.raises(NotFound) as exc_info:
            await resolve_post_by_id(anonymous_info, post_id)
        assert exc_info.value.code == 404


class TestDeleteAndStatus:
    async def test_owner_deletes(self, alice):
        post = await create_post(alice, post_input())

        assert await delete_post(alice, post.id) == post.id

        with pytest.raises(NotFound):
            await resolve_post_by_id(alice, post.id)
        me = await resolve_current_user(alice)
        assert me.posts == []

    async def test_admin_deletes_any_post(self, alice, register, user_info):
        post = await create_post(alice, post_input())
        admin = user_info(await register("admin@x.com"), "ADMIN")
        assert await delete_post(admin, post.id) == post.id

    async def test_delete_missing_post(self, alice):
        with pytest.raises(NotFound):
            await delete_post(alice, str(uuid.uuid4()))

    async def test_update_status(self, alice, bob):
        post = await create_post(alice, post_input())

        result = await update_post_status(alice, post.id, "private")

        assert (result.post_id, result.status) == (post.id, "private")
        assert (await resolve_post_by_id(alice, post.id)).post_status == "private"
        with pytest.raises(AuthorizationDenied):
            await update_post_status(bob, post.id, "public")


class TestComments:
    async def test_add_and_delete_comment(self, alice, bob):
        post = await create_post(alice, post_input())

        comment = await add_comment(bob, CommentInputData(post_id=post.id, text="nice"))

        assert comment.user_id == caller_id(bob)
        assert comment.post_id == post.id
        assert comment.text == "nice"
        fetched = await resolve_post_by_id(bob, post.id)
        assert [(c.id, c.user, c.text) for c in fetched.comments] == [
            (comment.id, caller_id(bob), "nice")
        ]

        deleted = await delete_comment(bob, post.id, comment.id)

        assert (deleted.post_id, deleted.comment_id) == (post.id, comment.id)
        assert (await resolve_post_by_id(bob, post.id)).comments == []

    async def test_post_owner_cannot_delete_others_comment(self, alice, bob):
        post = await create_post(alice, post_input())
        comment = await add_comment(bob, CommentInputData(post_id=post.id, text="nice"))

        with pytest.raises(AuthorizationDenied):
            await delete_comment(alice, post.id, comment.id)

    async def test_comment_on_missing_post(self, alice):
        with pytest.raises(NotFound) as exc_info:
            await add_comment(alice, CommentInputData(post_id=str(uuid.uuid4()), text="x"))
        assert exc_info.value.message == "Post does not exist!"

    async def test_delete_missing_comment(self, alice):
        post = await create_post(alice, post_input())
        with pytest.raises(NotFound) as exc_info:
            await delete_comment(alice, post.id, str(uuid.uuid4()))
        assert exc_info.value.message == "This comment does not exist!"


async def _reactions(model, post_id: str) -> list:
    async with get_async_session() as session:
        result = await session.execute(select(model).where(model.post_id == uuid.UUID(post_id)))
        return list(result.scalars().all())


class TestReactions:
    async def test_first_like_is_added(self, alice, bob):
        post = await create_post(alice, post_input())

        result = await like_post(bob, post.id)

        likes = await _reactions(PostLikes, post.id)
        assert [str(like.id) for like in likes] == [result.id]
        assert result.post_id == post.id

    async def test_second_like_removes_it(self, alice, bob):
        post = await create_post(alice, post_input())

        added = await like_post(bob, post.id)
        removed = await like_post(bob, post.id)

        assert removed.id == added.id
        assert await _reactions(PostLikes, post.id) == []

    async def test_like_replaces_unlike(self, alice, bob):
        post = await create_post(alice, post_input())
        await unlike_post(bob, post.id)
        assert len(await _reactions(PostUnlikes, post.id)) == 1

        await like_post(bob, post.id)

        assert await _reactions(PostUnlikes, post.id) == []
        assert len(await _reactions(PostLikes, post.id)) == 1

    async def test_unlike_replaces_like(self, alice, bob):
        post = await create_post(alice, post_input())
        await like_post(bob, post.id)

        await unlike_post(bob, post.id)

        assert await _reactions(PostLikes, post.id) == []
        fetched = await resolve_post_by_id(bob, post.id)
        assert [u.user for u in fetched.unlikes] == [caller_id(bob)]

    async def test_like_missing_post(self, alice):
        with pytest.raises(NotFound):
            await like_post(alice, str(uuid.uuid4()))


class TestFavorites:
    async def test_toggle_favorite(self, alice, bob):
        post = await create_post(alice, post_input())

        assert await favorite_post(bob, post.id) == post.id
        assert (await resolve_current_user(bob)).favorites == [post.id]

        await favorite_post(bob, post.id)
        assert (await resolve_current_user(bob)).favorites == []

    async def test_unknown_caller(self, alice, user_info):
        post = await create_post(alice, post_input())
        with pytest.raises(NotFound) as exc_info:
            await favorite_post(user_info(uuid.uuid4()), post.id)
        assert exc_info.value.message == "User does not exist!"

    async def test_deleting_post_keeps_favorites(self, alice, bob):
        post = await create_post(alice, post_input())
        await favorite_post(bob, post.id)

        await delete_post(alice, post.id)

        async with get_async_session() as session:
            result = await session.execute(select(UserFavorites))
            assert [str(f.post_id) for f in result.scalars().all()] == [post.id]
