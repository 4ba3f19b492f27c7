"""
Root GraphQL query definitions
"""

from uuid import UUID

import strawberry

from ..types.item import Item
from ..types.order import Order
from ..types.user import User


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def me(self, info: strawberry.Info) -> User | None:
        """Get the current authenticated user."""
        from ..resolvers.auth import resolve_current_user

        return await resolve_current_user(info)

    @strawberry.field
    async def users(self, info: strawberry.Info) -> list[User]:
        """List all users (permission managers only)."""
        from ..resolvers.user import resolve_users

        return await resolve_users(info)

    @strawberry.field
    async def item(self, info: strawberry.Info, id: UUID) -> Item | None:
        """Get an item by ID."""
        from ..resolvers.item import resolve_item

        return await resolve_item(info, id)

    @strawberry.field
    async def items(
        self, info: strawberry.Info, skip: int = 0, first: int | None = None
    ) -> list[Item]:
        """Get a page of items, newest first."""
        from ..resolvers.item import resolve_items

        return await resolve_items(info, skip, first)

    @strawberry.field(name="itemsCount")
    async def items_count(self, info: strawberry.Info) -> int:
        """Total number of items, for pagination."""
        from ..resolvers.item import resolve_items_count

        return await resolve_items_count(info)

    @strawberry.field
    async def order(self, info: strawberry.Info, id: UUID) -> Order:
        """Get one of the caller's orders."""
        from ..resolvers.order import resolve_order

        return await resolve_order(info, id)

    @strawberry.field
    async def orders(self, info: strawberry.Info) -> list[Order]:
        """Get the caller's orders."""
        from ..resolvers.order import resolve_orders

        return await resolve_orders(info)
