"""
User GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated
from uuid import UUID

import strawberry

from ...dbmodels import Permission as PermissionEnum

if TYPE_CHECKING:
    from ...dbmodels import Users
    from .cart import CartItem

Permission = strawberry.enum(PermissionEnum, name="Permission")


@strawberry.type
class User:
    """User type for GraphQL API.

    Password and reset fields are never exposed.
    """

    id: UUID
    name: str
    email: str
    permissions: list[Permission]  # type: ignore[valid-type]
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @strawberry.field
    async def cart(
        self, info: strawberry.Info
    ) -> list[Annotated["CartItem", strawberry.lazy(".cart")]]:  # noqa: E501
        """Get the items in this user's cart."""
        from ..resolvers.cart import resolve_user_cart

        return await resolve_user_cart(self, info)


@strawberry.type
class AuthPayload:
    """Bearer token plus the user it was issued for."""

    token: str
    user: User


def user_from_model(user: "Users") -> User:
    return User(
        id=user.id,
        name=user.name,
        email=user.email,
        permissions=[PermissionEnum(p) for p in user.permissions],
        created_at=user.created_at,
        updated_at=user.updated_at,
    )
