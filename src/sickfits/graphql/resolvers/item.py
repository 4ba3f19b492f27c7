"""
Item resolvers
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID

import strawberry
from sqlalchemy import func, select

from ...auth.permissions import require_authenticated
from ...config import settings
from ...database.connection import get_async_session, store_errors
from ...dbmodels import Items
from ...errors import ForbiddenError, NotFoundError, ValidationError
from ...logging import get_logger
from ..access_control import can_modify_item, get_auth_context_from_info

if TYPE_CHECKING:
    from ..types.item import Item

logger = get_logger(__name__)

# Only these columns can be changed through updateItem
UPDATABLE_ITEM_FIELDS = ("title", "description", "price", "image", "large_image")


def _check_price(price: int | None) -> None:
    if price is not None and price < 0:
        raise ValidationError("Price cannot be negative")


# Query resolvers
async def resolve_item(info: strawberry.Info, id: UUID) -> Item | None:
    with store_errors("load item"):
        async with get_async_session() as session:
            result = await session.execute(select(Items).where(Items.id == id))
            item = result.scalar_one_or_none()

    if not item:
        return None

    from ..types.item import item_from_model

    return item_from_model(item)


async def resolve_items(info: strawberry.Info, skip: int, first: int | None) -> list[Item]:
    """List items newest first, one page at a time."""
    limit = first if first is not None else settings.items_per_page

    with store_errors("load items"):
        async with get_async_session() as session:
            stmt = select(Items).order_by(Items.created_at.desc()).offset(skip).limit(limit)
            result = await session.execute(stmt)
            items = result.scalars().all()

    from ..types.item import item_from_model

    return [item_from_model(item) for item in items]


async def resolve_items_count(info: strawberry.Info) -> int:
    with store_errors("count items"):
        async with get_async_session() as session:
            result = await session.execute(select(func.count()).select_from(Items))
            return result.scalar_one()


# Mutation resolvers
async def create_item(
    info: strawberry.Info,
    title: str,
    description: str,
    price: int,
    image: str | None = None,
    large_image: str | None = None,
) -> Item:
    """Create an item owned by the caller."""
    auth_context = require_authenticated(await get_auth_context_from_info(info))
    _check_price(price)

    with store_errors("create item"):
        async with get_async_session() as session:
            item = Items(
                user_id=auth_context.user_id,
                title=title,
                description=description,
                price=price,
                image=image,
                large_image=large_image,
            )
            session.add(item)
            await session.flush()
            await session.refresh(item)

    logger.info("Item created", item_id=str(item.id), user_id=str(auth_context.user_id))

    from ..types.item import item_from_model

    return item_from_model(item)


async def update_item(info: strawberry.Info, id: UUID, **changes: Any) -> Item:
    """
    Apply the given field changes to an item.

    Only fields in UPDATABLE_ITEM_FIELDS with a non-null value are written;
    the id never changes.
    """
    auth_context = require_authenticated(await get_auth_context_from_info(info))
    updates = {
        field: value
        for field, value in changes.items()
        if field in UPDATABLE_ITEM_FIELDS and value is not None
    }
    _check_price(updates.get("price"))

    with store_errors("update item"):
        async with get_async_session() as session:
            result = await session.execute(select(Items).where(Items.id == id))
            item = result.scalar_one_or_none()

            if not item:
                raise NotFoundError("Item not found")

            if not can_modify_item(item, auth_context, settings.item_access_policy):
                logger.info(
                    "Item update denied", item_id=str(id), user_id=str(auth_context.user_id)
                )
                raise ForbiddenError("You are not allowed to update that item!")

            for field, value in updates.items():
                setattr(item, field, value)
            item.updated_at = func.now()

            await session.flush()
            await session.refresh(item)

    logger.info(
        "Item updated",
        item_id=str(item.id),
        user_id=str(auth_context.user_id),
        updated_fields=list(updates),
    )

    from ..types.item import item_from_model

    return item_from_model(item)


async def delete_item(info: strawberry.Info, id: UUID) -> Item:
    """Delete an item and return it as it was."""
    auth_context = require_authenticated(await get_auth_context_from_info(info))

    with store_errors("delete item"):
        async with get_async_session() as session:
            result = await session.execute(select(Items).where(Items.id == id))
            item = result.scalar_one_or_none()

            if not item:
                raise NotFoundError("Item not found")

            if not can_modify_item(item, auth_context, settings.item_access_policy):
                logger.info(
                    "Item delete denied", item_id=str(id), user_id=str(auth_context.user_id)
                )
                raise ForbiddenError("You aren't allowed to delete that item!")

            from ..types.item import item_from_model

            deleted = item_from_model(item)
            await session.delete(item)

    logger.info("Item deleted", item_id=str(id), user_id=str(auth_context.user_id))
    return deleted
