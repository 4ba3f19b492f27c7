"""
Configuration validation for the Sick Fits application.

This module provides validation functions to ensure the application
is properly configured before startup.
"""

from __future__ import annotations

from typing import Any

from .config import settings
from .database.connection import test_database_connection
from .logging import get_logger

logger = get_logger(__name__)


class ValidationError(Exception):
    """Raised when application validation fails."""

    pass


def _is_production() -> bool:
    return settings.environment.lower() in ("production", "prod")


async def validate_database_connection() -> dict[str, Any]:
    """
    Validate that the database is accessible and responsive.

    Returns a dictionary with validation results and connection details.
    """
    results = {
        "valid": True,
        "warnings": [],
        "errors": [],
        "connection_info": None,
    }

    success, error_message = await test_database_connection()

    if success:
        results["connection_info"] = {
            "status": "connected",
            "message": "Database connection successful",
        }
        logger.info("Database connection validation successful")
    else:
        results["valid"] = False
        results["errors"].append(error_message)
        logger.error("Database connection validation failed", error=error_message)

    return results


def validate_auth_configuration() -> dict[str, Any]:
    """Check that tokens can be signed."""
    results = {"valid": True, "warnings": [], "errors": []}

    if not settings.jwt_secret:
        error = "SICKFITS_JWT_SECRET is not configured; tokens cannot be issued"
        results["errors"].append(error)
        results["valid"] = False
        logger.error(error)
    elif len(settings.jwt_secret) < 32:
        warning = "SICKFITS_JWT_SECRET is shorter than 32 characters"
        results["warnings"].append(warning)
        logger.warning(warning)
    else:
        logger.info("Auth validation: JWT signing configured")

    return results


def validate_services_configuration() -> dict[str, Any]:
    """Check the mail and payment settings."""
    results = {"valid": True, "warnings": [], "errors": []}

    if not settings.mail_from:
        results["errors"].append("SICKFITS_MAIL_FROM is not configured; reset mail cannot be sent")
        results["valid"] = False

    if not settings.stripe_secret_key:
        results["errors"].append(
            "SICKFITS_STRIPE_SECRET_KEY is not configured; checkout is unavailable"
        )
        results["valid"] = False
    elif settings.stripe_secret_key.startswith("sk_test_") and _is_production():
        results["warnings"].append("A Stripe test key is configured in production")

    for error in results["errors"]:
        logger.error(error)
    for warning in results["warnings"]:
        logger.warning(warning)

    return results


async def validate_startup_configuration() -> dict[str, Any]:
    """
    Comprehensive startup validation.

    This function should be called during application startup to ensure
    all critical configuration is valid.
    """
    logger.info("Starting application configuration validation")

    db_results = await validate_database_connection()
    auth_results = validate_auth_configuration()
    services_results = validate_services_configuration()

    combined_results = {
        "overall_valid": db_results["valid"] and auth_results["valid"] and services_results["valid"],
        "database": db_results,
        "auth": auth_results,
        "services": services_results,
        "environment": {
            "environment": settings.environment,
            "debug": settings.debug,
            "item_access_policy": settings.item_access_policy.value,
        },
    }

    if combined_results["overall_valid"]:
        logger.info("Application configuration validation completed successfully")
    else:
        all_errors = (
            db_results.get("errors", [])
            + auth_results.get("errors", [])
            + services_results.get("errors", [])
        )
        logger.error("Application configuration validation failed", errors=all_errors)

    return combined_results


def get_startup_recommendations(validation_results: dict[str, Any]) -> list[str]:
    """
    Generate startup recommendations based on validation results.
    """
    recommendations = []

    if not validation_results.get("database", {}).get("valid", False):
        recommendations.append(
            "Database connection failed - check that PostgreSQL is running and accessible"
        )
        return recommendations

    if validation_results["auth"]["warnings"]:
        recommendations.append("Use a long random value for SICKFITS_JWT_SECRET")

    if settings.reveal_unknown_emails and _is_production():
        recommendations.append(
            "Disable SICKFITS_REVEAL_UNKNOWN_EMAILS in production to avoid account enumeration"
        )

    if not validation_results["overall_valid"]:
        recommendations.append("Fix configuration errors before deploying to production")

    return recommendations
