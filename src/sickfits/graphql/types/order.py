"""
Order GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

import strawberry

if TYPE_CHECKING:
    from ...dbmodels import OrderItems, Orders


@strawberry.type
class OrderItem:
    """Snapshot of an item as it was when the order was placed."""

    id: UUID
    title: str
    description: str
    image: str | None
    large_image: str | None
    price: int
    quantity: int
    item_id: UUID | None


@strawberry.type
class Order:
    id: UUID
    total: int
    charge: str
    user_id: UUID
    items: list[OrderItem]
    created_at: datetime | None = None


def order_item_from_model(order_item: "OrderItems") -> OrderItem:
    return OrderItem(
        id=order_item.id,
        title=order_item.title,
        description=order_item.description,
        image=order_item.image,
        large_image=order_item.large_image,
        price=order_item.price,
        quantity=order_item.quantity,
        item_id=order_item.item_id,
    )


def order_from_model(order: "Orders") -> Order:
    return Order(
        id=order.id,
        total=order.total,
        charge=order.charge,
        user_id=order.user_id,
        items=[order_item_from_model(oi) for oi in order.items],
        created_at=order.created_at,
    )
