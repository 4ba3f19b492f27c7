"""
Account resolvers: signup, signin and password reset
"""

from __future__ import annotations

import secrets
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import strawberry
from sqlalchemy import select, update

from ...auth.factory import get_auth_adapter
from ...auth.passwords import hash_password, verify_password
from ...config import settings
from ...database.connection import get_async_session, store_errors
from ...dbmodels import Permission, Users
from ...errors import (
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    NotFoundError,
    ValidationError,
)
from ...logging import get_logger
from ...mail import get_mail_sender, make_a_nice_email
from ..access_control import get_auth_context_from_info

if TYPE_CHECKING:
    from ..types.user import AuthPayload, User

logger = get_logger(__name__)

RESET_TOKEN_BYTES = 20


def _unknown_email_error(email: str) -> NotFoundError:
    if settings.reveal_unknown_emails:
        return NotFoundError(f"No such user found for email: {email}")
    return NotFoundError("No such user found")


async def _auth_payload(user: Users) -> AuthPayload:
    from ..types.user import AuthPayload as AuthPayloadType
    from ..types.user import user_from_model

    token = await get_auth_adapter().issue_token(user.id)
    return AuthPayloadType(token=token, user=user_from_model(user))


async def resolve_current_user(info: strawberry.Info) -> User | None:
    """Get the current authenticated user, or None for anonymous callers."""
    auth_context = await get_auth_context_from_info(info)
    if not auth_context.is_authenticated:
        return None

    with store_errors("load current user"):
        async with get_async_session() as session:
            stmt = select(Users).where(Users.id == auth_context.user_id)
            result = await session.execute(stmt)
            user = result.scalar_one_or_none()

    if not user:
        return None

    from ..types.user import user_from_model

    return user_from_model(user)


async def signup(info: strawberry.Info, email: str, password: str, name: str) -> AuthPayload:
    """
    Create a new account with the USER role and sign it in.

    Duplicate emails are rejected by the store's unique constraint.
    """
    email = email.lower()
    hashed = await hash_password(password)

    with store_errors("create user"):
        async with get_async_session() as session:
            user = Users(
                name=name,
                email=email,
                password=hashed,
                permissions=[Permission.USER.value],
            )
            session.add(user)
            await session.flush()
            await session.refresh(user)

    logger.info("User signed up", user_id=str(user.id))
    return await _auth_payload(user)


async def signin(info: strawberry.Info, email: str, password: str) -> AuthPayload:
    """Check credentials and issue a token."""
    email = email.lower()

    with store_errors("sign in"):
        async with get_async_session() as session:
            stmt = select(Users).where(Users.email == email)
            result = await session.execute(stmt)
            user = result.scalar_one_or_none()

    if not user:
        logger.info("Signin for unknown email")
        raise _unknown_email_error(email)

    if not await verify_password(password, user.password):
        logger.info("Signin with invalid password", user_id=str(user.id))
        raise InvalidCredentialsError()

    logger.info("User signed in", user_id=str(user.id))
    return await _auth_payload(user)


async def request_reset(info: strawberry.Info, email: str) -> User:
    """
    Start a password reset.

    Stores a random token and its expiry on the user and mails the user a
    link containing the token.
    """
    email = email.lower()

    with store_errors("store reset token"):
        async with get_async_session() as session:
            stmt = select(Users).where(Users.email == email)
            result = await session.execute(stmt)
            user = result.scalar_one_or_none()

            if not user:
                logger.info("Password reset requested for unknown email")
                raise _unknown_email_error(email)

            user.reset_token = secrets.token_hex(RESET_TOKEN_BYTES)
            user.reset_token_expiry = datetime.now(UTC) + timedelta(
                milliseconds=settings.reset_token_window_ms
            )
            await session.flush()

    reset_link = f"{settings.frontend_url.rstrip('/')}/reset?resetToken={user.reset_token}"
    await get_mail_sender().send(
        to=user.email,
        subject="Your password reset token",
        html=make_a_nice_email(
            f'Your password reset link is here!\n\n<a href="{reset_link}">Click Here to reset</a>'
        ),
    )

    logger.info("Password reset requested", user_id=str(user.id))

    from ..types.user import user_from_model

    return user_from_model(user)


async def reset_password(
    info: strawberry.Info, reset_token: str, password: str, confirm_password: str
) -> AuthPayload:
    """
    Finish a password reset.

    The token must match and must not be past its expiry. The token check and
    the write are one UPDATE, so two concurrent resets with the same token
    cannot both succeed.
    """
    if password != confirm_password:
        raise ValidationError("Passwords do not match")

    hashed = await hash_password(password)
    now = datetime.now(UTC)

    with store_errors("reset password"):
        async with get_async_session() as session:
            stmt = (
                update(Users)
                .where(
                    Users.reset_token == reset_token,
                    Users.reset_token_expiry >= now,
                )
                .values(password=hashed, reset_token=None, reset_token_expiry=None)
                .returning(Users)
            )
            result = await session.execute(stmt)
            user = result.scalar_one_or_none()

            if not user:
                logger.info("Rejected invalid or expired reset token")
                raise InvalidOrExpiredTokenError()

    logger.info("Password reset completed", user_id=str(user.id))
    return await _auth_payload(user)
