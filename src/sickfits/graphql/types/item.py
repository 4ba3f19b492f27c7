"""
Item GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

import strawberry

if TYPE_CHECKING:
    from ...dbmodels import Items


@strawberry.type
class Item:
    """An item for sale. Prices are in minor currency units."""

    id: UUID
    title: str
    description: str
    image: str | None
    large_image: str | None
    price: int
    user_id: UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None


def item_from_model(item: "Items") -> Item:
    return Item(
        id=item.id,
        title=item.title,
        description=item.description,
        image=item.image,
        large_image=item.large_image,
        price=item.price,
        user_id=item.user_id,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )
