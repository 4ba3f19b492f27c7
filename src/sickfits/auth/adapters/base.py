"""Base token adapter interface and types."""

from __future__ import annotations

from typing import Literal, NotRequired, Protocol, TypedDict
from uuid import UUID


class Principal(TypedDict):
    """Identity extracted from an incoming token."""

    provider: Literal["jwt"]
    subject: str  # user id (sub)
    claims: NotRequired[dict]


class AuthAdapter(Protocol):
    """Signs bearer tokens for users and verifies them later."""

    async def verify_token(self, token: str) -> Principal:
        """
        Verify a token and return the principal identity.

        Raises:
            AuthenticationError: If token is invalid or expired
        """
        ...

    async def issue_token(self, user_id: UUID, claims: dict | None = None) -> str:
        """
        Issue a signed token whose subject is ``user_id``.

        Args:
            user_id: User the token is bound to
            claims: Optional additional claims to include
        """
        ...


class AuthenticationError(Exception):
    """Raised when a token cannot be verified."""

    pass
