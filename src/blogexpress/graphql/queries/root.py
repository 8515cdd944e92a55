"""
Root GraphQL query definitions
"""

import strawberry

from ..types.post import Post
from ..types.user import AuthData, User


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def login(self, info: strawberry.Info, email: str, password: str) -> AuthData:
        """Exchange credentials for a session token."""
        from ..resolvers.user import login

        return await login(info, email, password)

    @strawberry.field(name="allUsers")
    async def all_users(self, info: strawberry.Info) -> list[User]:
        from ..resolvers.user import resolve_all_users

        return await resolve_all_users(info)

    @strawberry.field(name="currentUser")
    async def current_user(self, info: strawberry.Info) -> User:
        """Get the current authenticated user."""
        from ..resolvers.user import resolve_current_user

        return await resolve_current_user(info)

    @strawberry.field(name="getPost")
    async def get_post(self, info: strawberry.Info, id: strawberry.ID) -> Post:
        """Get a post by ID."""
        from ..resolvers.post import resolve_post_by_id

        return await resolve_post_by_id(info, id)

    @strawberry.field(name="getAllPosts")
    async def get_all_posts(self, info: strawberry.Info) -> list[Post]:
        from ..resolvers.post import resolve_all_posts

        return await resolve_all_posts(info)

    @strawberry.field(name="getPublicPosts")
    async def get_public_posts(self, info: strawberry.Info) -> list[Post]:
        """Get posts with a public status."""
        from ..resolvers.post import resolve_public_posts

        return await resolve_public_posts(info)

    @strawberry.field(name="getPrivatePosts")
    async def get_private_posts(self, info: strawberry.Info) -> list[Post]:
        """Get every post created by the current user."""
        from ..resolvers.post import resolve_private_posts

        return await resolve_private_posts(info)
