"""
Main FastAPI application for the Sick Fits backend
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import settings
from ..database import init_database
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware

# Configure logging before creating logger
configure_logging(debug=settings.debug)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting Sick Fits API...")
    init_database()
    logger.info("Database initialized")

    from ..validation import (
        ValidationError,
        get_startup_recommendations,
        validate_startup_configuration,
    )

    validation_results = await validate_startup_configuration()

    if not validation_results["overall_valid"]:
        logger.error(
            "Application configuration validation failed - some features may not work properly",
            database_errors=validation_results["database"].get("errors", []),
            auth_errors=validation_results["auth"].get("errors", []),
            services_errors=validation_results["services"].get("errors", []),
        )

        if settings.environment.lower() in ("production", "prod"):
            raise ValidationError("Critical configuration validation failed in production")

    recommendations = get_startup_recommendations(validation_results)
    if recommendations:
        logger.info("Configuration recommendations", recommendations=recommendations)

    yield

    # Shutdown
    logger.info("Shutting down Sick Fits API...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Sick Fits API",
        description="GraphQL backend for the Sick Fits store",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(LoggingContextMiddleware)

    # CORS configuration; credentials so the token cookie is sent
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

    # GraphQL endpoint (allow disabling for tests)
    if not os.getenv("SICKFITS_DISABLE_GRAPHQL"):
        from ..graphql.schema import create_graphql_router, validate_schema

        logger.info("Validating GraphQL schema...")
        validate_schema()

        app.include_router(create_graphql_router(), prefix="")
        logger.info("GraphQL endpoint initialized successfully", endpoint="/graphql")

    return app


# Create the main application instance
app = create_app()
