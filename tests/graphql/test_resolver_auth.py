"""
Unit tests for signup, signin and password reset resolvers
"""

import uuid
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import bcrypt
import jwt
import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import IntegrityError, OperationalError

from sickfits.config import settings
from sickfits.dbmodels import Users
from sickfits.errors import (
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from sickfits.graphql.resolvers.auth import (
    request_reset,
    reset_password,
    resolve_current_user,
    signin,
    signup,
)

RESOLVER = "sickfits.graphql.resolvers.auth"


def decode(token: str) -> dict:
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
    )


@pytest.fixture
def stored_user():
    """A persisted user whose password is 'correct horse'."""
    return Users(
        id=uuid.uuid4(),
        name="Wes",
        email="wes@example.com",
        password=bcrypt.hashpw(b"correct horse", bcrypt.gensalt(rounds=4)).decode(),
        permissions=["USER"],
    )


class TestSignup:
    @pytest.mark.asyncio
    async def test_signup_creates_user_and_token(self, mock_info, mock_session):
        new_id = uuid.uuid4()

        async def refresh(user):
            user.id = new_id

        mock_session.refresh = refresh

        with patch(f"{RESOLVER}.get_async_session") as mock_get_session:
            mock_get_session.return_value.__aenter__.return_value = mock_session

            payload = await signup(
                mock_info, email="Wes@Example.COM", password="hunter22", name="Wes"
            )

        created = mock_session.add.call_args[0][0]
        assert created.email == "wes@example.com"
        assert created.password != "hunter22"
        assert bcrypt.checkpw(b"hunter22", created.password.encode())
        assert created.permissions == ["USER"]

        assert payload.user.email == "wes@example.com"
        assert payload.user.id == new_id
        assert decode(payload.token)["sub"] == str(new_id)

    @pytest.mark.asyncio
    async def test_signup_duplicate_email_is_store_error(self, mock_info, mock_session):
        mock_session.flush.side_effect = IntegrityError("INSERT", {}, Exception("duplicate"))

        with patch(f"{RESOLVER}.get_async_session") as mock_get_session:
            mock_get_session.return_value.__aenter__.return_value = mock_session

            with pytest.raises(StoreError):
                await signup(mock_info, email="wes@example.com", password="x", name="Wes")


class TestSignin:
    @pytest.mark.asyncio
    async def test_signin_success(self, mock_info, mock_session, stored_user, result_of):
        mock_session.execute.return_value = result_of(stored_user)

        with patch(f"{RESOLVER}.get_async_session") as mock_get_session:
            mock_get_session.return_value.__aenter__.return_value = mock_session

            payload = await signin(mock_info, email="WES@example.com", password="correct horse")

        assert payload.user.id == stored_user.id
        assert decode(payload.token)["sub"] == str(stored_user.id)

    @pytest.mark.asyncio
    async def test_signin_wrong_password(self, mock_info, mock_session, stored_user, result_of):
        mock_session.execute.return_value = result_of(stored_user)

        with patch(f"{RESOLVER}.get_async_session") as mock_get_session:
            mock_get_session.return_value.__aenter__.return_value = mock_session

            with pytest.raises(InvalidCredentialsError):
                await signin(mock_info, email="wes@example.com", password="wrong")

    @pytest.mark.asyncio
    async def test_signin_unknown_email_hides_address(self, mock_info, mock_session, result_of):
        mock_session.execute.return_value = result_of(None)

        with patch(f"{RESOLVER}.get_async_session") as mock_get_session:
            mock_get_session.return_value.__aenter__.return_value = mock_session

            with pytest.raises(NotFoundError) as exc_info:
                await signin(mock_info, email="ghost@example.com", password="x")

        assert "ghost@example.com" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_signin_unknown_email_revealed_when_configured(
        self, mock_info, mock_session, result_of, monkeypatch
    ):
        monkeypatch.setattr(settings, "reveal_unknown_emails", True)
        mock_session.execute.return_value = result_of(None)

        with patch(f"{RESOLVER}.get_async_session") as mock_get_session:
            mock_get_session.return_value.__aenter__.return_value = mock_session

            with pytest.raises(NotFoundError, match="ghost@example.com"):
                await signin(mock_info, email="ghost@example.com", password="x")

    @pytest.mark.asyncio
    async def test_signin_store_failure_is_store_error(self, mock_info, mock_session):
        mock_session.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("connection lost")
        )

        with patch(f"{RESOLVER}.get_async_session") as mock_get_session:
            mock_get_session.return_value.__aenter__.return_value = mock_session

            with pytest.raises(StoreError) as exc_info:
                await signin(mock_info, email="wes@example.com", password="correct horse")

        assert exc_info.value.details == {"operation": "sign in"}


class TestRequestReset:
    @pytest.mark.asyncio
    async def test_request_reset_stores_token_and_sends_mail(
        self, mock_info, mock_session, stored_user, result_of
    ):
        mock_session.execute.return_value = result_of(stored_user)
        sender = MagicMock(send=AsyncMock())

        with (
            patch(f"{RESOLVER}.get_async_session") as mock_get_session,
            patch(f"{RESOLVER}.get_mail_sender", return_value=sender),
        ):
            mock_get_session.return_value.__aenter__.return_value = mock_session

            before = datetime.now(UTC)
            result = await request_reset(mock_info, email="wes@example.com")

        assert result.id == stored_user.id
        assert len(stored_user.reset_token) == 40
        int(stored_user.reset_token, 16)

        window = timedelta(milliseconds=settings.reset_token_window_ms)
        assert before + window <= stored_user.reset_token_expiry <= datetime.now(UTC) + window

        sender.send.assert_awaited_once()
        kwargs = sender.send.call_args.kwargs
        assert kwargs["to"] == "wes@example.com"
        assert f"/reset?resetToken={stored_user.reset_token}" in kwargs["html"]

    @pytest.mark.asyncio
    async def test_request_reset_unknown_email(self, mock_info, mock_session, result_of):
        mock_session.execute.return_value = result_of(None)
        sender = MagicMock(send=AsyncMock())

        with (
            patch(f"{RESOLVER}.get_async_session") as mock_get_session,
            patch(f"{RESOLVER}.get_mail_sender", return_value=sender),
        ):
            mock_get_session.return_value.__aenter__.return_value = mock_session

            with pytest.raises(NotFoundError):
                await request_reset(mock_info, email="ghost@example.com")

        sender.send.assert_not_awaited()


class TestResetPassword:
    @pytest.mark.asyncio
    async def test_mismatched_passwords(self, mock_info):
        with patch(f"{RESOLVER}.get_async_session") as mock_get_session:
            with pytest.raises(ValidationError):
                await reset_password(
                    mock_info, reset_token="abc", password="one", confirm_password="two"
                )
            mock_get_session.assert_not_called()

    @pytest.mark.asyncio
    async def test_reset_clears_token_and_sets_password(
        self, mock_info, mock_session, stored_user, result_of
    ):
        mock_session.execute.return_value = result_of(stored_user)

        with patch(f"{RESOLVER}.get_async_session") as mock_get_session:
            mock_get_session.return_value.__aenter__.return_value = mock_session

            payload = await reset_password(
                mock_info,
                reset_token="a" * 40,
                password="new password",
                confirm_password="new password",
            )

        mock_session.execute.assert_awaited_once()
        stmt = mock_session.execute.call_args[0][0]
        sql = str(stmt.compile(dialect=postgresql.dialect()))
        assert sql.startswith("UPDATE users SET")
        assert "RETURNING" in sql

        params = stmt.compile().params
        assert bcrypt.checkpw(b"new password", params["password"].encode())
        assert params.get("reset_token") is None
        assert params.get("reset_token_expiry") is None
        assert params["reset_token_1"] == "a" * 40
        assert payload.user.id == stored_user.id
        assert decode(payload.token)["sub"] == str(stored_user.id)

    @pytest.mark.asyncio
    async def test_lookup_requires_unexpired_token(self, mock_info, mock_session, result_of):
        mock_session.execute.return_value = result_of(None)

        with patch(f"{RESOLVER}.get_async_session") as mock_get_session:
            mock_get_session.return_value.__aenter__.return_value = mock_session

            before = datetime.now(UTC)
            with pytest.raises(InvalidOrExpiredTokenError):
                await reset_password(
                    mock_info, reset_token="b" * 40, password="p", confirm_password="p"
                )

        stmt = mock_session.execute.call_args[0][0]
        sql = str(stmt.compile(dialect=postgresql.dialect()))
        assert "users.reset_token =" in sql
        assert "users.reset_token_expiry >=" in sql

        # The expiry bound is "now", so a token issued one full window ago fails
        params = stmt.compile().params
        bound = next(
            v for k, v in params.items() if k.startswith("reset_token_expiry") and v is not None
        )
        assert before <= bound <= datetime.now(UTC)
        expired_at = before - timedelta(milliseconds=1)
        assert expired_at < bound

    @pytest.mark.asyncio
    async def test_store_failure_is_store_error(self, mock_info, mock_session):
        mock_session.execute.side_effect = OperationalError(
            "UPDATE", {}, Exception("connection lost")
        )

        with patch(f"{RESOLVER}.get_async_session") as mock_get_session:
            mock_get_session.return_value.__aenter__.return_value = mock_session

            with pytest.raises(StoreError) as exc_info:
                await reset_password(
                    mock_info, reset_token="c" * 40, password="p", confirm_password="p"
                )

        assert exc_info.value.details == {"operation": "reset password"}


class TestCurrentUser:
    @pytest.mark.asyncio
    async def test_me_anonymous(self, mock_info, anonymous_context):
        with patch(f"{RESOLVER}.get_auth_context_from_info") as mock_get_auth:
            mock_get_auth.return_value = anonymous_context
            assert await resolve_current_user(mock_info) is None

    @pytest.mark.asyncio
    async def test_me_authenticated(
        self, mock_info, mock_session, stored_user, result_of, make_auth_context
    ):
        mock_session.execute.return_value = result_of(stored_user)

        with (
            patch(f"{RESOLVER}.get_auth_context_from_info") as mock_get_auth,
            patch(f"{RESOLVER}.get_async_session") as mock_get_session,
        ):
            mock_get_auth.return_value = make_auth_context(user_id=stored_user.id)
            mock_get_session.return_value.__aenter__.return_value = mock_session

            user = await resolve_current_user(mock_info)

        assert user.email == stored_user.email
        assert not hasattr(user, "password")

    @pytest.mark.asyncio
    async def test_me_store_failure_is_store_error(
        self, mock_info, mock_session, make_auth_context
    ):
        mock_session.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("connection lost")
        )

        with (
            patch(f"{RESOLVER}.get_auth_context_from_info") as mock_get_auth,
            patch(f"{RESOLVER}.get_async_session") as mock_get_session,
        ):
            mock_get_auth.return_value = make_auth_context()
            mock_get_session.return_value.__aenter__.return_value = mock_session

            with pytest.raises(StoreError):
                await resolve_current_user(mock_info)
