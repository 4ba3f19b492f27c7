"""
Main GraphQL schema definition using Strawberry
"""

from typing import Any

import strawberry
from fastapi import Request
from graphql import GraphQLError
from graphql import validate_schema as gql_validate_schema
from strawberry.fastapi import GraphQLRouter
from strawberry.types import ExecutionContext

from ..config import settings
from ..errors import SickFitsError
from ..logging import get_logger
from .mutations.root import Mutation
from .queries.root import Query

logger = get_logger(__name__)


class SickFitsSchema(strawberry.Schema):
    """Schema that logs resolver failures through structlog.

    Domain errors carry their code into the GraphQL error's extensions
    (see SickFitsError.extensions); they are logged at info level. Anything
    else is unexpected and logged as an error.
    """

    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: ExecutionContext | None = None,
    ) -> None:
        operation = execution_context.operation_name if execution_context else None
        for error in errors:
            original = error.original_error
            if isinstance(original, SickFitsError):
                logger.info(
                    "GraphQL operation failed",
                    operation=operation,
                    code=original.code,
                    message=original.message,
                    path=error.path,
                )
            else:
                logger.error(
                    "Unhandled GraphQL error",
                    operation=operation,
                    error=str(error),
                    path=error.path,
                    exc_info=original,
                )


# Create the GraphQL schema
schema = SickFitsSchema(
    query=Query,
    mutation=Mutation,
)


def validate_schema() -> None:
    """Validate the GraphQL schema at startup.

    This ensures that all type references can be resolved and catches
    circular reference errors early, causing the server to fail fast
    rather than returning 404s at runtime.

    Raises:
        Exception: If the schema is invalid or has unresolved types
    """
    try:
        # Convert to GraphQL core schema to trigger full validation
        graphql_schema = schema._schema

        errors = gql_validate_schema(graphql_schema)
        if errors:
            error_messages = [str(e) for e in errors]
            raise Exception(f"GraphQL schema validation failed: {'; '.join(error_messages)}")

        # Check that introspection query works (catches most resolution issues)
        from graphql import get_introspection_query, graphql_sync

        introspection_query = get_introspection_query()
        result = graphql_sync(graphql_schema, introspection_query)

        if result.errors:
            error_messages = [str(e) for e in result.errors]
            raise Exception(f"GraphQL introspection failed: {'; '.join(error_messages)}")

        logger.info("GraphQL schema validation successful")

    except Exception as e:
        logger.error("GraphQL schema validation failed", error=str(e))
        raise


# Create the GraphQL router for FastAPI integration
def create_graphql_router() -> GraphQLRouter[dict[str, Any], None]:
    """Create a GraphQL router for FastAPI."""

    async def get_context(request: Request) -> dict[str, Any]:
        """Get the context for GraphQL resolvers."""
        return {
            "request": request,
        }

    return GraphQLRouter(
        schema,
        path="/graphql",
        graphiql=settings.debug,
        context_getter=get_context,
    )
