"""
Root GraphQL mutation definitions
"""

from uuid import UUID

import strawberry

from ..types.cart import CartItem
from ..types.item import Item
from ..types.order import Order
from ..types.user import AuthPayload, Permission, User


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    # Account mutations
    @strawberry.mutation(name="signup")
    async def signup(
        self, info: strawberry.Info, email: str, password: str, name: str
    ) -> AuthPayload:
        """Create an account and sign it in."""
        from ..resolvers.auth import signup

        return await signup(info, email=email, password=password, name=name)

    @strawberry.mutation(name="signin")
    async def signin(self, info: strawberry.Info, email: str, password: str) -> AuthPayload:
        """Sign in with email and password."""
        from ..resolvers.auth import signin

        return await signin(info, email=email, password=password)

    @strawberry.mutation(name="requestReset")
    async def request_reset(self, info: strawberry.Info, email: str) -> User:
        """Email a password reset link."""
        from ..resolvers.auth import request_reset

        return await request_reset(info, email=email)

    @strawberry.mutation(name="resetPassword")
    async def reset_password(
        self,
        info: strawberry.Info,
        reset_token: str,
        password: str,
        confirm_password: str,
    ) -> AuthPayload:
        """Set a new password using a reset token."""
        from ..resolvers.auth import reset_password

        return await reset_password(
            info,
            reset_token=reset_token,
            password=password,
            confirm_password=confirm_password,
        )

    # Item mutations
    @strawberry.mutation(name="createItem")
    async def create_item(
        self,
        info: strawberry.Info,
        title: str,
        description: str,
        price: int,
        image: str | None = None,
        large_image: str | None = None,
    ) -> Item:
        """Create a new item."""
        from ..resolvers.item import create_item

        return await create_item(
            info,
            title=title,
            description=description,
            price=price,
            image=image,
            large_image=large_image,
        )

    @strawberry.mutation(name="updateItem")
    async def update_item(
        self,
        info: strawberry.Info,
        id: UUID,
        title: str | None = None,
        description: str | None = None,
        price: int | None = None,
        image: str | None = None,
        large_image: str | None = None,
    ) -> Item:
        """Update an existing item."""
        from ..resolvers.item import update_item

        return await update_item(
            info,
            id,
            title=title,
            description=description,
            price=price,
            image=image,
            large_image=large_image,
        )

    @strawberry.mutation(name="deleteItem")
    async def delete_item(self, info: strawberry.Info, id: UUID) -> Item:
        """Delete an item."""
        from ..resolvers.item import delete_item

        return await delete_item(info, id)

    # Cart mutations
    @strawberry.mutation(name="addToCart")
    async def add_to_cart(self, info: strawberry.Info, id: UUID) -> CartItem:
        """Add an item to the caller's cart."""
        from ..resolvers.cart import add_to_cart

        return await add_to_cart(info, id)

    @strawberry.mutation(name="removeFromCart")
    async def remove_from_cart(self, info: strawberry.Info, id: UUID) -> CartItem | None:
        """Remove a row from the caller's cart."""
        from ..resolvers.cart import remove_from_cart

        return await remove_from_cart(info, id)

    # Checkout
    @strawberry.mutation(name="createOrder")
    async def create_order(self, info: strawberry.Info, token: str) -> Order:
        """Pay for the cart with a payment token and create an order."""
        from ..resolvers.order import create_order

        return await create_order(info, token)

    # User mutations
    @strawberry.mutation(name="updateUser")
    async def update_user(
        self, info: strawberry.Info, name: str | None = None, email: str | None = None
    ) -> User:
        """Update the caller's profile."""
        from ..resolvers.user import update_user

        return await update_user(info, name=name, email=email)

    @strawberry.mutation(name="updatePermissions")
    async def update_permissions(
        self,
        info: strawberry.Info,
        permissions: list[Permission],  # type: ignore[valid-type]
        user_id: UUID,
    ) -> User:
        """Replace a user's permissions."""
        from ..resolvers.user import update_permissions

        return await update_permissions(info, permissions, user_id)
