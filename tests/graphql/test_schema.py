"""
Tests for the GraphQL schema surface and the HTTP endpoint
"""

import httpx
import pytest

from blogexpress.graphql.resolvers import MUTATION_RESOLVERS, QUERY_RESOLVERS, RESOLVERS
from strawberry.fastapi import GraphQLRouter

from blogexpress.graphql.schema import create_graphql_router, schema, validate_schema

EXPECTED_QUERIES = {
    "login",
    "allUsers",
    "currentUser",
    "getPost",
    "getAllPosts",
    "getPublicPosts",
    "getPrivatePosts",
}

EXPECTED_MUTATIONS = {
    "createUser",
    "updateUser",
    "updateUserRole",
    "adminUpdateRoles",
    "forgotPassword",
    "resetPassword",
    "deleteUser",
    "createPost",
    "updatePost",
    "updatePostStatus",
    "addComment",
    "deleteComment",
    "likePost",
    "unlikePost",
    "favoritePost",
    "deletePost",
}


class TestSchemaSurface:
    def test_schema_is_valid(self):
        validate_schema()

    def test_root_fields_match_registry(self):
        graphql_schema = schema._schema
        assert set(graphql_schema.query_type.fields) == EXPECTED_QUERIES
        assert set(graphql_schema.mutation_type.fields) == EXPECTED_MUTATIONS
        assert set(QUERY_RESOLVERS) == EXPECTED_QUERIES
        assert set(MUTATION_RESOLVERS) == EXPECTED_MUTATIONS
        assert len(RESOLVERS) == len(EXPECTED_QUERIES) + len(EXPECTED_MUTATIONS)

    def test_router_builds(self):
        router = create_graphql_router()
        assert isinstance(router, GraphQLRouter)
        assert any(route.path == "/graphql" for route in router.routes)

    def test_output_field_names(self):
        graphql_schema = schema._schema
        post_fields = set(graphql_schema.get_type("Post").fields)
        assert {"_id", "postStatus", "createdAt", "updatedAt", "creator"} <= post_fields
        assert {"comments", "likes", "unlikes"} <= post_fields
        assert {"_id", "posts", "favorites"} <= set(graphql_schema.get_type("User").fields)
        assert set(graphql_schema.get_type("DeletedComment").fields) == {"postId", "commentId"}
        assert set(graphql_schema.get_type("CommentData").fields) == {
            "_id",
            "userId",
            "postId",
            "text",
        }


CREATE_USER = """
mutation Register($input: UserInputData!) {
  createUser(userInput: $input) { _id email role }
}
"""

LOGIN = """
query Login($email: String!, $password: String!) {
  login(email: $email, password: $password) { token userId }
}
"""

CREATE_POST = """
mutation NewPost($input: PostInputData!) {
  createPost(postInput: $input) { _id title postStatus creator { _id name } }
}
"""

GET_POST = """
query GetPost($id: ID!) {
  getPost(id: $id) { _id title creator { _id email } }
}
"""


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.usefixtures("database")
class TestGraphQLEndpoint:
    @pytest.fixture
    def client(self):
        from blogexpress.api.app import app

        return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")

    async def test_health(self, client):
        async with client:
            response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_register_login_and_post(self, client):
        async with client:
            created = await client.post(
                "/graphql",
                json={
                    "query": CREATE_USER,
                    "variables": {
                        "input": {
                            "email": "a@x.com",
                            "name": "Alice",
                            "password": "secret",
                            "confirmPassword": "secret",
                        }
                    },
                },
            )
            user = created.json()["data"]["createUser"]
            assert user["role"] == "USER"

            logged_in = await client.post(
                "/graphql",
                json={"query": LOGIN, "variables": {"email": "a@x.com", "password": "secret"}},
            )
            auth = logged_in.json()["data"]["login"]
            assert auth["userId"] == user["_id"]

            posted = await client.post(
                "/graphql",
                json={
                    "query": CREATE_POST,
                    "variables": {
                        "input": {"title": "T", "content": "C", "postStatus": "public"}
                    },
                },
                headers={"Authorization": f"Bearer {auth['token']}"},
            )
            post = posted.json()["data"]["createPost"]
            assert post["creator"]["_id"] == user["_id"]

            fetched = await client.post(
                "/graphql", json={"query": GET_POST, "variables": {"id": post["_id"]}}
            )
            assert fetched.json()["data"]["getPost"]["creator"]["email"] == "a@x.com"

    async def test_error_carries_code_extension(self, client):
        async with client:
            response = await client.post(
                "/graphql",
                json={
                    "query": CREATE_POST,
                    "variables": {
                        "input": {"title": "T", "content": "C", "postStatus": "public"}
                    },
                },
            )

        body = response.json()
        assert body["data"] is None
        assert body["errors"][0]["message"] == "Not authenticated!"
        assert body["errors"][0]["extensions"] == {"code": 401}

    async def test_validation_error_carries_data(self, client):
        async with client:
            response = await client.post(
                "/graphql",
                json={
                    "query": CREATE_USER,
                    "variables": {
                        "input": {
                            "email": "nope",
                            "name": "A",
                            "password": "secret",
                            "confirmPassword": "secret",
                        }
                    },
                },
            )

        error = response.json()["errors"][0]
        assert error["message"] == "Invalid input."
        assert error["extensions"] == {"code": 422, "data": [{"message": "E-Mail is invalid."}]}
