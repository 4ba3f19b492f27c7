"""
Fixtures shared by the resolver unit tests
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
import strawberry

from sickfits.auth.context import AuthContext


def _result_of(value):
    return MagicMock(
        scalar_one_or_none=MagicMock(return_value=value),
        scalar_one=MagicMock(return_value=value),
    )


def _make_auth_context(user_id=None, permissions=("USER",)) -> AuthContext:
    user_id = user_id or uuid.uuid4()
    return AuthContext(
        user_id=user_id,
        permissions=list(permissions),
        principal={"provider": "jwt", "subject": str(user_id)},
        token="test-token",
    )


@pytest.fixture
def mock_info():
    """Create a mock GraphQL info object with request context."""
    info = MagicMock(spec=strawberry.Info)
    info.context = {
        "request": MagicMock(
            headers=MagicMock(
                get=MagicMock(
                    side_effect=lambda key: {"authorization": "Bearer test-token"}.get(key)
                )
            ),
            cookies={},
        )
    }
    return info


@pytest.fixture
def auth_context():
    """Create an authenticated context for a plain USER."""
    return _make_auth_context()


@pytest.fixture
def anonymous_context():
    return AuthContext(user_id=None)


@pytest.fixture
def mock_session():
    """An AsyncSession stand-in; add() is synchronous on the real session."""
    session = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def result_of():
    """Build the Result returned by AsyncSession.execute for a single row."""
    return _result_of


@pytest.fixture
def make_auth_context():
    """Build an authenticated context with the given permissions."""
    return _make_auth_context
