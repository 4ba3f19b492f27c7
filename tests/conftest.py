"""
Shared pytest fixtures and configuration for all tests.
"""

import os
import shutil
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from psycopg import Connection  # type: ignore[import]
from pytest_postgresql.executors import PostgreSQLExecutor  # type: ignore[import]

from alembic import command
from alembic.config import Config
from sickfits.config import settings

TEST_JWT_SECRET = "test-secret-that-is-long-enough-for-hs256"


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def test_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Signing secret and a cheap bcrypt cost for every test."""
    monkeypatch.setattr(settings, "jwt_secret", TEST_JWT_SECRET)
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)


@pytest.fixture(scope="function")
def test_database(
    postgresql: Connection[Any],
) -> Generator[str, None, None]:
    """Return the DSN for the running pytest-postgresql database."""
    info = postgresql.info
    dsn = (
        f"postgresql://{info.user}:{getattr(info, 'password', '') or ''}"
        f"@{info.host}:{info.port}/{info.dbname}"
    )
    yield dsn


@pytest.fixture(scope="function")
def alembic_migrate(
    postgresql_proc: PostgreSQLExecutor, test_database: str
) -> Generator[None, None, None]:
    """Run Alembic upgrade to head against the pytest-postgresql instance."""
    _ = postgresql_proc
    os.environ["SICKFITS_DATABASE_URL"] = test_database
    cfg = Config(str(Path(__file__).parent.parent / "alembic.ini"))
    command.upgrade(cfg, "head")
    yield
    command.downgrade(cfg, "base")


@pytest.fixture(scope="function")
def reset_shared_db_connections(test_database: str) -> Generator[None, None, None]:
    """Reset and configure shared database connections for the test database."""
    from sickfits.database.connection import init_database, reset_database

    reset_database()
    init_database(test_database, force_reinit=True)

    yield

    reset_database()


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line(  # type: ignore[reportUnknownMemberType]
        "markers", "requires_db: mark test as requiring database connection"
    )
    config.addinivalue_line("markers", "integration: mark test as integration test")  # type: ignore[reportUnknownMemberType]
    config.addinivalue_line("markers", "unit: mark test as unit test")  # type: ignore[reportUnknownMemberType]


def pytest_collection_modifyitems(config: Any, items: list[Any]) -> None:
    """Skip database tests when no PostgreSQL server binaries are installed."""
    if shutil.which("pg_ctl") or shutil.which("pg_config"):
        return
    skip_db = pytest.mark.skip(reason="PostgreSQL binaries not available")
    for item in items:
        if "requires_db" in item.keywords:
            item.add_marker(skip_db)
