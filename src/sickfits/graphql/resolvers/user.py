"""
User resolvers: profile edits and permission management
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any
from uuid import UUID

import strawberry
from sqlalchemy import func, select

from ...auth.permissions import require_authenticated, require_permission
from ...database.connection import get_async_session, store_errors
from ...dbmodels import Permission, Users
from ...errors import NotFoundError, UnauthorizedError
from ...logging import get_logger
from ..access_control import get_auth_context_from_info

if TYPE_CHECKING:
    from ..types.user import User

logger = get_logger(__name__)

# Fields a user may change on their own record
SELF_EDITABLE_FIELDS = ("name", "email")

PERMISSION_MANAGERS = (Permission.ADMIN, Permission.PERMISSIONUPDATE)


async def resolve_users(info: strawberry.Info) -> list[User]:
    """All users. Requires ADMIN or PERMISSIONUPDATE."""
    auth_context = require_authenticated(await get_auth_context_from_info(info))
    require_permission(auth_context.permissions, PERMISSION_MANAGERS)

    with store_errors("load users"):
        async with get_async_session() as session:
            result = await session.execute(select(Users).order_by(Users.created_at))
            users = result.scalars().all()

    from ..types.user import user_from_model

    return [user_from_model(user) for user in users]


async def update_user(info: strawberry.Info, **changes: Any) -> User:
    """
    Update the caller's own profile.

    Anything outside SELF_EDITABLE_FIELDS is ignored, so permissions cannot
    be changed through this path.
    """
    auth_context = require_authenticated(await get_auth_context_from_info(info))
    updates = {
        field: value
        for field, value in changes.items()
        if field in SELF_EDITABLE_FIELDS and value is not None
    }
    if "email" in updates:
        updates["email"] = updates["email"].lower()

    with store_errors("update user"):
        async with get_async_session() as session:
            result = await session.execute(select(Users).where(Users.id == auth_context.user_id))
            user = result.scalar_one_or_none()

            if not user:
                raise UnauthorizedError()

            for field, value in updates.items():
                setattr(user, field, value)
            user.updated_at = func.now()

            await session.flush()
            await session.refresh(user)

    logger.info("User updated", user_id=str(user.id), updated_fields=list(updates))

    from ..types.user import user_from_model

    return user_from_model(user)


async def update_permissions(
    info: strawberry.Info, permissions: Iterable[Permission], user_id: UUID
) -> User:
    """
    Replace another user's permissions with exactly ``permissions``.

    The caller is re-read from the store so a revoked role takes effect
    immediately.
    """
    auth_context = require_authenticated(await get_auth_context_from_info(info))
    new_permissions = [Permission(p).value for p in permissions]

    with store_errors("update permissions"):
        async with get_async_session() as session:
            result = await session.execute(select(Users).where(Users.id == auth_context.user_id))
            current_user = result.scalar_one_or_none()
            if not current_user:
                raise UnauthorizedError("You must be logged in to update permissions!")

            require_permission(current_user.permissions, PERMISSION_MANAGERS)

            result = await session.execute(select(Users).where(Users.id == user_id))
            target = result.scalar_one_or_none()
            if not target:
                raise NotFoundError("User not found")

            target.permissions = new_permissions
            target.updated_at = func.now()

            await session.flush()
            await session.refresh(target)

    logger.info(
        "Permissions updated",
        user_id=str(user_id),
        updated_by=str(auth_context.user_id),
        permissions=new_permissions,
    )

    from ..types.user import user_from_model

    return user_from_model(target)
