"""
Shared access control logic for GraphQL resolvers
"""

from typing import TYPE_CHECKING

import strawberry

from ..auth.context import AuthContext
from ..auth.middleware import get_auth_context_optional
from ..auth.permissions import has_permission
from ..config import ItemAccessPolicy
from ..dbmodels import Permission
from ..logging import get_logger

if TYPE_CHECKING:
    from ..dbmodels import Items

logger = get_logger(__name__)


async def get_auth_context_from_info(info: strawberry.Info) -> AuthContext:
    """
    Extract auth context from GraphQL info object.

    Returns an unauthenticated context if the request is missing or carries
    no valid token.
    """
    request = info.context.get("request")
    if not request:
        logger.error("Request not found in GraphQL context")
        return AuthContext(user_id=None)

    return await get_auth_context_optional(
        authorization=request.headers.get("authorization"),
        token_cookie=request.cookies.get("token"),
    )


def can_modify_item(item: "Items", auth_context: AuthContext, policy: ItemAccessPolicy) -> bool:
    """
    Check if the caller may update or delete ``item``.

    OWNER_OR_ADMIN allows the owner and any ADMIN. OWNER_AND_ADMIN only
    allows an owner who also holds ADMIN.

    Args:
        item: The item being modified
        auth_context: The caller
        policy: Which ownership rule to apply

    Returns:
        True if access is allowed, False otherwise
    """
    if not auth_context.is_authenticated:
        return False

    is_owner = item.user_id == auth_context.user_id
    is_admin = has_permission(auth_context.permissions, [Permission.ADMIN])

    if policy == ItemAccessPolicy.OWNER_AND_ADMIN:
        return is_owner and is_admin
    return is_owner or is_admin
