"""
Cart resolvers
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry
from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.orm import selectinload

from ...auth.permissions import has_permission, require_authenticated
from ...database.connection import get_async_session, store_errors
from ...dbmodels import CartItems, Items, Permission
from ...errors import NotFoundError
from ...logging import get_logger
from ..access_control import get_auth_context_from_info

if TYPE_CHECKING:
    from ..types.cart import CartItem
    from ..types.user import User

logger = get_logger(__name__)


def build_add_to_cart_statement(user_id: UUID, item_id: UUID):
    """
    Insert a cart row with quantity 1, or bump the existing row by one.

    A single statement, so concurrent adds of the same item cannot create
    two rows for one user.
    """
    stmt = pg_insert(CartItems).values(user_id=user_id, item_id=item_id, quantity=1)
    return stmt.on_conflict_do_update(
        index_elements=[CartItems.user_id, CartItems.item_id],
        set_={"quantity": CartItems.quantity + 1},
    ).returning(CartItems)


async def resolve_user_cart(user: User, info: strawberry.Info) -> list[CartItem]:
    """Cart rows for ``user``. Visible to the user themself and to admins."""
    auth_context = await get_auth_context_from_info(info)
    if not auth_context.is_authenticated:
        return []
    if auth_context.user_id != user.id and not has_permission(
        auth_context.permissions, [Permission.ADMIN]
    ):
        logger.info("Access denied to user cart", user_id=str(user.id))
        return []

    with store_errors("load cart"):
        async with get_async_session() as session:
            stmt = (
                select(CartItems)
                .where(CartItems.user_id == user.id)
                .options(selectinload(CartItems.item))
                .order_by(CartItems.created_at)
            )
            result = await session.execute(stmt)
            cart = result.scalars().all()

    from ..types.cart import cart_item_from_model

    return [cart_item_from_model(cart_item) for cart_item in cart]


async def add_to_cart(info: strawberry.Info, id: UUID) -> CartItem:
    """Add one of item ``id`` to the caller's cart."""
    auth_context = require_authenticated(await get_auth_context_from_info(info))

    with store_errors("add to cart"):
        async with get_async_session() as session:
            item = await session.get(Items, id)
            if not item:
                raise NotFoundError("Item not found")

            result = await session.execute(build_add_to_cart_statement(auth_context.user_id, id))
            cart_item = result.scalar_one()

    logger.info(
        "Item added to cart",
        cart_item_id=str(cart_item.id),
        item_id=str(id),
        quantity=cart_item.quantity,
        user_id=str(auth_context.user_id),
    )

    from ..types.cart import cart_item_from_model

    return cart_item_from_model(cart_item, item)


async def remove_from_cart(info: strawberry.Info, id: UUID) -> CartItem | None:
    """
    Remove cart row ``id`` if it belongs to the caller.

    Returns None when there was nothing of the caller's to remove.
    """
    auth_context = require_authenticated(await get_auth_context_from_info(info))

    with store_errors("remove from cart"):
        async with get_async_session() as session:
            stmt = (
                delete(CartItems)
                .where(CartItems.id == id, CartItems.user_id == auth_context.user_id)
                .returning(CartItems)
            )
            result = await session.execute(stmt)
            cart_item = result.scalar_one_or_none()

            if not cart_item:
                logger.info("Nothing to remove from cart", cart_item_id=str(id))
                return None

            item = await session.get(Items, cart_item.item_id)

    logger.info(
        "Item removed from cart", cart_item_id=str(id), user_id=str(auth_context.user_id)
    )

    from ..types.cart import cart_item_from_model

    return cart_item_from_model(cart_item, item)
