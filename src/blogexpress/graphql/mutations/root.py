"""
Root GraphQL mutation definitions
"""

import strawberry

from ..types.post import CommentData, DeletedComment, LikeData, Post, PostStatusData
from ..types.user import RoleData, User


# Input types for mutations
@strawberry.input
class UserInputData:
    """Input for registering or updating an account."""

    email: str
    name: str
    password: str
    confirm_password: str


@strawberry.input
class PostInputData:
    """Input for creating or updating a post."""

    title: str
    content: str
    post_status: str


@strawberry.input
class CommentInputData:
    post_id: strawberry.ID
    text: str


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    # User mutations
    @strawberry.mutation(name="createUser")
    async def create_user(self, info: strawberry.Info, user_input: UserInputData) -> User:
        """Register a new account."""
        from ..resolvers.user import create_user

        return await create_user(info, user_input)

    @strawberry.mutation(name="updateUser")
    async def update_user(self, info: strawberry.Info, user_input: UserInputData) -> User:
        """Overwrite the current user's profile."""
        from ..resolvers.user import update_user

        return await update_user(info, user_input)

    @strawberry.mutation(name="updateUserRole")
    async def update_user_role(self, info: strawberry.Info, role: str) -> RoleData:
        from ..resolvers.user import update_user_role

        return await update_user_role(info, role)

    @strawberry.mutation(name="adminUpdateRoles")
    async def admin_update_roles(
        self, info: strawberry.Info, user_id: strawberry.ID, role: str
    ) -> RoleData:
        """Change another user's role (admin only)."""
        from ..resolvers.user import admin_update_roles

        return await admin_update_roles(info, user_id, role)

    @strawberry.mutation(name="forgotPassword")
    async def forgot_password(self, info: strawberry.Info, email: str) -> str:
        """Email a password reset link."""
        from ..resolvers.user import forgot_password

        return await forgot_password(info, email)

    @strawberry.mutation(name="resetPassword")
    async def reset_password(
        self, info: strawberry.Info, token: str, password: str, confirm_password: str
    ) -> str:
        from ..resolvers.user import reset_password

        return await reset_password(info, token, password, confirm_password)

    @strawberry.mutation(name="deleteUser")
    async def delete_user(self, info: strawberry.Info, id: strawberry.ID) -> strawberry.ID:
        """Delete an account and its posts."""
        from ..resolvers.user import delete_user

        return strawberry.ID(await delete_user(info, id))

    # Post mutations
    @strawberry.mutation(name="createPost")
    async def create_post(self, info: strawberry.Info, post_input: PostInputData) -> Post:
        """Create a new post."""
        from ..resolvers.post import create_post

        return await create_post(info, post_input)

    @strawberry.mutation(name="updatePost")
    async def update_post(
        self, info: strawberry.Info, id: strawberry.ID, post_input: PostInputData
    ) -> Post:
        """Update an existing post."""
        from ..resolvers.post import update_post

        return await update_post(info, id, post_input)

    @strawberry.mutation(name="updatePostStatus")
    async def update_post_status(
        self, info: strawberry.Info, id: strawberry.ID, status: str
    ) -> PostStatusData:
        from ..resolvers.post import update_post_status

        return await update_post_status(info, id, status)

    @strawberry.mutation(name="addComment")
    async def add_comment(
        self, info: strawberry.Info, comment_input: CommentInputData
    ) -> CommentData:
        """Comment on a post."""
        from ..resolvers.post import add_comment

        return await add_comment(info, comment_input)

    @strawberry.mutation(name="deleteComment")
    async def delete_comment(
        self, info: strawberry.Info, post_id: strawberry.ID, comment_id: strawberry.ID
    ) -> DeletedComment:
        """Remove one of the current user's comments."""
        from ..resolvers.post import delete_comment

        return await delete_comment(info, post_id, comment_id)

    @strawberry.mutation(name="likePost")
    async def like_post(self, info: strawberry.Info, post_id: strawberry.ID) -> LikeData:
        """Toggle a like on a post."""
        from ..resolvers.post import like_post

        return await like_post(info, post_id)

    @strawberry.mutation(name="unlikePost")
    async def unlike_post(self, info: strawberry.Info, post_id: strawberry.ID) -> LikeData:
        """Toggle an unlike on a post."""
        from ..resolvers.post import unlike_post

        return await unlike_post(info, post_id)

    @strawberry.mutation(name="favoritePost")
    async def favorite_post(self, info: strawberry.Info, post_id: strawberry.ID) -> strawberry.ID:
        """Toggle a post in the current user's favorites."""
        from ..resolvers.post import favorite_post

        return strawberry.ID(await favorite_post(info, post_id))

    @strawberry.mutation(name="deletePost")
    async def delete_post(self, info: strawberry.Info, id: strawberry.ID) -> strawberry.ID:
        """Delete a post."""
        from ..resolvers.post import delete_post

        return strawberry.ID(await delete_post(info, id))
