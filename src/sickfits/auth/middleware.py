"""Request authentication: token extraction and AuthContext resolution."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select

from ..database.connection import get_async_session
from ..dbmodels import Users
from ..logging import get_logger
from .adapters.base import AuthenticationError
from .context import AuthContext
from .factory import get_auth_adapter

logger = get_logger(__name__)


def extract_token(authorization: str | None, token_cookie: str | None = None) -> str | None:
    """
    Pull the bearer token out of the Authorization header or the ``token`` cookie.

    The header wins when both are present.
    """
    if authorization:
        scheme, _, value = authorization.partition(" ")
        if scheme.lower() == "bearer" and value.strip():
            return value.strip()
        logger.warning("Invalid authorization format received")
        return None

    if token_cookie:
        return token_cookie

    return None


async def get_auth_context(token: str) -> AuthContext:
    """
    Verify ``token`` and load the caller's current permissions.

    Raises:
        AuthenticationError: If the token is invalid or the user no longer exists
    """
    adapter = get_auth_adapter()
    principal = await adapter.verify_token(token)

    try:
        user_id = UUID(principal["subject"])
    except ValueError as e:
        raise AuthenticationError("Token subject is not a user id") from e

    async with get_async_session() as db:
        stmt = select(Users.permissions).where(Users.id == user_id)
        result = await db.execute(stmt)
        permissions = result.scalar_one_or_none()

    if permissions is None:
        raise AuthenticationError("User for token no longer exists")

    return AuthContext(
        user_id=user_id,
        permissions=list(permissions),
        principal=principal,
        token=token,
    )


async def get_auth_context_optional(
    authorization: str | None = None,
    token_cookie: str | None = None,
) -> AuthContext:
    """
    Optional authentication - returns unauthenticated context if no valid token.

    Resolvers decide for themselves whether an anonymous caller is acceptable.
    """
    token = extract_token(authorization, token_cookie)
    if not token:
        return AuthContext(user_id=None)

    try:
        return await get_auth_context(token)
    except AuthenticationError as e:
        logger.info("Treating request as anonymous", reason=str(e))
        return AuthContext(user_id=None)
