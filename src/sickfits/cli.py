#!/usr/bin/env python3
"""
Main CLI entry point for the Sick Fits backend server.
"""

import os
import sys
from pathlib import Path

import click
import uvicorn
from alembic import command
from alembic.config import Config

from sickfits import __version__
from sickfits.logging import configure_logging, get_logger

logger = get_logger(__name__)


def get_alembic_config() -> Config:
    """Get Alembic configuration from the project's alembic.ini."""
    ini_path = os.getenv("SICKFITS_ALEMBIC_INI")
    alembic_ini = Path(ini_path) if ini_path else Path.cwd() / "alembic.ini"

    if not alembic_ini.exists():
        raise FileNotFoundError(f"alembic.ini not found at {alembic_ini}")

    return Config(str(alembic_ini))


@click.group()
@click.version_option(version=__version__, prog_name="sickfits")
def cli() -> None:
    """Sick Fits CLI - run the API server and manage the database schema."""
    pass


@cli.command()
@click.option(
    "--host",
    default="0.0.0.0",
    help="Host to bind to (default: 0.0.0.0)",
)
@click.option(
    "--port",
    default=4444,
    type=int,
    help="Port to bind to (default: 4444)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
@click.option(
    "--workers",
    default=1,
    type=int,
    help="Number of worker processes (default: 1)",
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(
    host: str,
    port: int,
    reload: bool,
    workers: int,
    log_level: str,
) -> None:
    """Start the Sick Fits API server."""

    configure_logging(debug=(log_level == "debug"))

    logger.info(
        "Starting Sick Fits API server",
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )

    # Settings are read at import time, so pass them through the environment
    if log_level == "debug":
        os.environ["SICKFITS_DEBUG"] = "true"
        os.environ["SICKFITS_LOG_LEVEL"] = "debug"
    else:
        os.environ.setdefault("SICKFITS_DEBUG", "false")
        os.environ.setdefault("SICKFITS_LOG_LEVEL", log_level)

    try:
        if reload or workers > 1:
            uvicorn.run(
                "sickfits.api.app:app",
                host=host,
                port=port,
                reload=reload,
                workers=(workers if not reload else 1),  # reload doesn't work with multiple workers
                log_level=log_level,
                access_log=True,
            )
        else:
            from sickfits.api.app import app

            uvicorn.run(
                app,
                host=host,
                port=port,
                log_level=log_level,
                access_log=True,
            )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.group()
def migrate() -> None:
    """Manage the database schema with Alembic."""
    configure_logging()


@migrate.command()
@click.argument("revision", default="head")
def upgrade(revision: str) -> None:
    """Upgrade database to a revision (default: head)."""
    try:
        config = get_alembic_config()
        logger.info("Upgrading database", revision=revision)
        command.upgrade(config, revision)
        logger.info("Database upgrade completed successfully")
    except Exception as e:
        logger.error("Database upgrade failed", error=str(e))
        sys.exit(1)


@migrate.command()
@click.argument("revision", default="-1")
def downgrade(revision: str) -> None:
    """Downgrade database to a revision (default: -1)."""
    try:
        config = get_alembic_config()
        logger.info("Downgrading database", revision=revision)
        command.downgrade(config, revision)
        logger.info("Database downgrade completed successfully")
    except Exception as e:
        logger.error("Database downgrade failed", error=str(e))
        sys.exit(1)


@migrate.command()
def current() -> None:
    """Show the current database revision."""
    try:
        command.current(get_alembic_config(), verbose=True)
    except Exception as e:
        logger.error("Failed to read current revision", error=str(e))
        sys.exit(1)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
