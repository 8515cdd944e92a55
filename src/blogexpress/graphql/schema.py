"""
Main GraphQL schema definition using Strawberry
"""

from typing import Any

import strawberry
from fastapi import Request
from graphql import get_introspection_query, graphql_sync
from graphql import validate_schema as gql_validate_schema
from strawberry.fastapi import GraphQLRouter

from ..auth.middleware import get_auth_context
from ..config import settings
from ..logging import bind_user, get_logger
from .mutations.root import Mutation
from .queries.root import Query

logger = get_logger(__name__)

schema = strawberry.Schema(query=Query, mutation=Mutation)


class SchemaValidationError(Exception):
    """The schema is structurally invalid or cannot be introspected."""


def validate_schema() -> None:
    """Validate the GraphQL schema at startup.

    Catches unresolved lazy type references early, so the server fails on
    boot rather than on the first request.

    Raises:
        SchemaValidationError: If the schema is invalid or has unresolved types
    """
    graphql_schema = schema._schema

    errors = gql_validate_schema(graphql_schema)
    if errors:
        message = "; ".join(str(e) for e in errors)
        logger.error("GraphQL schema validation failed", error=message)
        raise SchemaValidationError(f"GraphQL schema validation failed: {message}")

    result = graphql_sync(graphql_schema, get_introspection_query())
    if result.errors:
        message = "; ".join(str(e) for e in result.errors)
        logger.error("GraphQL introspection failed", error=message)
        raise SchemaValidationError(f"GraphQL introspection failed: {message}")

    logger.info("GraphQL schema validation successful")


async def get_context(request: Request) -> dict[str, Any]:
    """Build the per-request resolver context, including the caller identity."""
    auth = await get_auth_context(request.headers.get("authorization"))
    if auth.is_authenticated:
        bind_user(str(auth.user_id))

    return {
        "request": request,
        "auth": auth,
    }


def create_graphql_router() -> GraphQLRouter[dict[str, Any], None]:
    """Create a GraphQL router for FastAPI."""
    return GraphQLRouter(
        schema,
        path="/graphql",
        graphql_ide="graphiql" if settings.debug else None,
        context_getter=get_context,
    )
