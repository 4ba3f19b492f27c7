"""
Checkout and order resolvers
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from ...auth.permissions import has_permission, require_authenticated
from ...config import settings
from ...database.connection import get_async_session, store_errors
from ...dbmodels import CartItems, OrderItems, Orders, Permission, Users
from ...errors import (
    ChargedButNotRecordedError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from ...logging import get_logger
from ...payments import get_payment_processor, make_idempotency_key
from ..access_control import get_auth_context_from_info

if TYPE_CHECKING:
    from ..types.order import Order

logger = get_logger(__name__)


def cart_total(cart: list[CartItems]) -> int:
    """Sum of price x quantity over cart rows whose item still exists."""
    return sum(cart_item.item.price * cart_item.quantity for cart_item in cart if cart_item.item)


def snapshot_order_items(cart: list[CartItems], user_id: UUID) -> list[OrderItems]:
    """Copy each cart row's item into an OrderItem, keeping a link to the original."""
    return [
        OrderItems(
            user_id=user_id,
            item_id=cart_item.item.id,
            title=cart_item.item.title,
            description=cart_item.item.description,
            image=cart_item.item.image,
            large_image=cart_item.item.large_image,
            price=cart_item.item.price,
            quantity=cart_item.quantity,
        )
        for cart_item in cart
        if cart_item.item
    ]


def _order_with_items(order_id: UUID | None = None, charge_id: str | None = None):
    stmt = select(Orders).options(selectinload(Orders.items))
    if order_id is not None:
        stmt = stmt.where(Orders.id == order_id)
    if charge_id is not None:
        stmt = stmt.where(Orders.charge == charge_id)
    return stmt.execution_options(populate_existing=True)


# Query resolvers
async def resolve_order(info: strawberry.Info, id: UUID) -> Order:
    """Get one order. Only its owner or an admin may see it."""
    auth_context = require_authenticated(await get_auth_context_from_info(info))

    with store_errors("load order"):
        async with get_async_session() as session:
            result = await session.execute(_order_with_items(order_id=id))
            order = result.scalar_one_or_none()

    if not order:
        raise NotFoundError("Order not found")

    if order.user_id != auth_context.user_id and not has_permission(
        auth_context.permissions, [Permission.ADMIN]
    ):
        raise ForbiddenError("You can't see this order")

    from ..types.order import order_from_model

    return order_from_model(order)


async def resolve_orders(info: strawberry.Info) -> list[Order]:
    """The caller's orders, newest first."""
    auth_context = require_authenticated(await get_auth_context_from_info(info))

    with store_errors("load orders"):
        async with get_async_session() as session:
            stmt = (
                select(Orders)
                .where(Orders.user_id == auth_context.user_id)
                .options(selectinload(Orders.items))
                .order_by(Orders.created_at.desc())
            )
            result = await session.execute(stmt)
            orders = result.scalars().all()

    from ..types.order import order_from_model

    return [order_from_model(order) for order in orders]


# Mutation resolvers
async def create_order(info: strawberry.Info, token: str) -> Order:
    """
    Charge the caller for their cart and turn it into an order.

    The total is computed here from current item prices. The charge is made
    first; the order, its item snapshots and the cart clearing are then
    written in one transaction. If that write fails the caller gets a
    ChargedButNotRecordedError carrying the charge id.
    """
    auth_context = require_authenticated(await get_auth_context_from_info(info))

    with store_errors("load cart"):
        async with get_async_session() as session:
            stmt = (
                select(Users)
                .where(Users.id == auth_context.user_id)
                .options(selectinload(Users.cart).selectinload(CartItems.item))
            )
            result = await session.execute(stmt)
            user = result.scalar_one_or_none()

    if not user:
        raise UnauthorizedError()

    cart = [cart_item for cart_item in user.cart if cart_item.item]
    if not cart:
        raise ValidationError("Your cart is empty")

    amount = cart_total(cart)
    idempotency_key = make_idempotency_key(
        user.id,
        token,
        [(cart_item.id, cart_item.quantity, cart_item.item.price) for cart_item in cart],
    )

    charge = await get_payment_processor().charge(
        amount=amount,
        currency=settings.currency,
        source=token,
        idempotency_key=idempotency_key,
    )

    try:
        async with get_async_session() as session:
            result = await session.execute(_order_with_items(charge_id=charge.id))
            order = result.scalar_one_or_none()

            if order:
                # Retried checkout; the processor replayed the original charge
                logger.info("Order already recorded for charge", order_id=str(order.id))
            else:
                order = Orders(
                    user_id=user.id,
                    total=charge.amount,
                    charge=charge.id,
                    items=snapshot_order_items(cart, user.id),
                )
                session.add(order)
                await session.execute(
                    delete(CartItems).where(
                        CartItems.user_id == user.id,
                        CartItems.id.in_([cart_item.id for cart_item in cart]),
                    )
                )
                await session.flush()

                result = await session.execute(_order_with_items(order_id=order.id))
                order = result.scalar_one()
    except SQLAlchemyError as e:
        logger.error(
            "Order could not be recorded after charge",
            charge_id=charge.id,
            amount=charge.amount,
            user_id=str(user.id),
            error=str(e),
        )
        raise ChargedButNotRecordedError(charge.id, charge.amount) from e

    logger.info(
        "Order created",
        order_id=str(order.id),
        charge_id=charge.id,
        total=order.total,
        user_id=str(user.id),
    )

    from ..types.order import order_from_model

    return order_from_model(order)
