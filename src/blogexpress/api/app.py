"""
Main FastAPI application for the BlogExpress backend
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import settings
from ..database import init_database
from ..database.connection import dispose_database
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware

# Configure logging before creating logger
configure_logging(debug=settings.debug, level=settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    _ = app
    logger.info("Starting BlogExpress API...")
    init_database()
    logger.info("Database initialized")

    if not settings.send_mail_user:
        logger.warning("SMTP credentials not configured; password reset emails will fail")

    yield

    logger.info("Shutting down BlogExpress API...")
    await dispose_database()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    from ..graphql.schema import create_graphql_router, validate_schema

    app = FastAPI(
        title="BlogExpress API",
        description="GraphQL backend for a blogging application",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(LoggingContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    # Fail fast: the server must not start with a broken schema
    logger.info("Validating GraphQL schema...")
    validate_schema()

    app.include_router(create_graphql_router(), prefix="")
    logger.info("GraphQL endpoint initialized successfully", endpoint="/graphql")

    return app


# Create the main application instance
app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "blogexpress.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
