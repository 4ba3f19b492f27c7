"""Authentication context for request handling."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from .adapters.base import Principal


@dataclass
class AuthContext:
    """Runtime authentication context for a request.

    Built once per GraphQL call and passed explicitly to every check.
    """

    user_id: UUID | None
    permissions: list[str] = field(default_factory=list)
    principal: Principal | None = None
    token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        """Check if the request is authenticated."""
        return self.user_id is not None and self.principal is not None
