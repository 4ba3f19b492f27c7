"""Unit tests for the JWT adapter."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import jwt
import pytest

from sickfits.auth.adapters.base import AuthenticationError
from sickfits.auth.adapters.jwt import JWTAuthAdapter


@pytest.fixture
def secret_key():
    return "test-secret-key-for-testing-only-32b"


@pytest.fixture
def jwt_adapter(secret_key):
    return JWTAuthAdapter(
        secret_key=secret_key,
        algorithm="HS256",
        issuer="test-sickfits",
        audience="test-api",
    )


def encode(secret_key, **overrides):
    now = datetime.now(UTC)
    payload = {
        "iss": "test-sickfits",
        "aud": "test-api",
        "sub": str(uuid4()),
        "iat": now,
        "nbf": now,
        "exp": now + timedelta(hours=1),
    }
    payload.update(overrides)
    return jwt.encode({k: v for k, v in payload.items() if v is not None}, secret_key, "HS256")


class TestJWTAdapter:
    """Test JWT authentication adapter."""

    @pytest.mark.asyncio
    async def test_issue_and_verify(self, jwt_adapter):
        user_id = uuid4()

        token = await jwt_adapter.issue_token(user_id)
        principal = await jwt_adapter.verify_token(token)

        assert principal["provider"] == "jwt"
        assert principal["subject"] == str(user_id)
        assert principal["claims"]["iss"] == "test-sickfits"

    @pytest.mark.asyncio
    async def test_expired_token(self, jwt_adapter, secret_key):
        token = encode(secret_key, exp=datetime.now(UTC) - timedelta(seconds=5))

        with pytest.raises(AuthenticationError, match="Invalid token"):
            await jwt_adapter.verify_token(token)

    @pytest.mark.asyncio
    async def test_wrong_audience(self, jwt_adapter, secret_key):
        with pytest.raises(AuthenticationError):
            await jwt_adapter.verify_token(encode(secret_key, aud="someone-else"))

    @pytest.mark.asyncio
    async def test_wrong_secret(self, jwt_adapter):
        with pytest.raises(AuthenticationError):
            await jwt_adapter.verify_token(encode("a-different-secret-key-entirely-for-tests"))

    @pytest.mark.asyncio
    async def test_missing_subject(self, jwt_adapter, secret_key):
        token = encode(secret_key, sub=None)

        with pytest.raises(AuthenticationError, match="sub"):
            await jwt_adapter.verify_token(token)

    @pytest.mark.asyncio
    async def test_garbage_token(self, jwt_adapter):
        with pytest.raises(AuthenticationError):
            await jwt_adapter.verify_token("not.a.jwt")
