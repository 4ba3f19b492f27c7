"""Permission checks against an AuthContext."""

from __future__ import annotations

from collections.abc import Iterable

from ..dbmodels import Permission
from ..errors import ForbiddenError, UnauthorizedError
from .context import AuthContext


def has_permission(permissions: Iterable[str], required: Iterable[Permission | str]) -> bool:
    """True if any of ``required`` is present in ``permissions``."""
    held = {str(p.value if isinstance(p, Permission) else p) for p in permissions}
    wanted = {str(p.value if isinstance(p, Permission) else p) for p in required}
    return bool(held & wanted)


def require_authenticated(auth_context: AuthContext | None) -> AuthContext:
    if not auth_context or not auth_context.is_authenticated:
        raise UnauthorizedError()
    return auth_context


def require_permission(
    permissions: Iterable[str], required: Iterable[Permission | str]
) -> None:
    """
    Raise ForbiddenError unless one of ``required`` is held.

    Args:
        permissions: Permissions the caller holds
        required: Any one of these grants access
    """
    required = list(required)
    if not has_permission(permissions, required):
        names = ", ".join(p.value if isinstance(p, Permission) else str(p) for p in required)
        raise ForbiddenError(
            f"You do not have sufficient permissions: {names}",
            details={"required": [p.value if isinstance(p, Permission) else p for p in required]},
        )
