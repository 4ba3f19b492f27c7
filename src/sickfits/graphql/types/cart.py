"""
Cart GraphQL type definitions
"""

from typing import TYPE_CHECKING, Any
from uuid import UUID

import strawberry

from .item import Item, item_from_model

if TYPE_CHECKING:
    from ...dbmodels import CartItems

_FROM_RELATIONSHIP: Any = object()


@strawberry.type
class CartItem:
    id: UUID
    quantity: int
    user_id: UUID
    # None once the underlying item has been deleted
    item: Item | None


def cart_item_from_model(cart_item: "CartItems", item: Any = _FROM_RELATIONSHIP) -> CartItem:
    """Convert a cart row. Pass ``item`` when the relationship was not loaded."""
    if item is _FROM_RELATIONSHIP:
        item = cart_item.item
    return CartItem(
        id=cart_item.id,
        quantity=cart_item.quantity,
        user_id=cart_item.user_id,
        item=item_from_model(item) if item is not None else None,
    )
