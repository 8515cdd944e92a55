"""Resolver package for the GraphQL schema.

``RESOLVERS`` maps every public GraphQL operation name to the coroutine that
implements it. The ``Query`` and ``Mutation`` root types expose exactly these
names.
"""

from . import post, user

QUERY_RESOLVERS = {
    "login": user.login,
    "allUsers": user.resolve_all_users,
    "currentUser": user.resolve_current_user,
    "getPost": post.resolve_post_by_id,
    "getAllPosts": post.resolve_all_posts,
    "getPublicPosts": post.resolve_public_posts,
    "getPrivatePosts": post.resolve_private_posts,
}

MUTATION_RESOLVERS = {
    "createUser": user.create_user,
    "updateUser": user.update_user,
    "updateUserRole": user.update_user_role,
    "adminUpdateRoles": user.admin_update_roles,
    "forgotPassword": user.forgot_password,
    "resetPassword": user.reset_password,
    "deleteUser": user.delete_user,
    "createPost": post.create_post,
    "updatePost": post.update_post,
    "updatePostStatus": post.update_post_status,
    "addComment": post.add_comment,
    "deleteComment": post.delete_comment,
    "likePost": post.like_post,
    "unlikePost": post.unlike_post,
    "favoritePost": post.favorite_post,
    "deletePost": post.delete_post,
}

RESOLVERS = {**QUERY_RESOLVERS, **MUTATION_RESOLVERS}

__all__ = ["MUTATION_RESOLVERS", "QUERY_RESOLVERS", "RESOLVERS"]
