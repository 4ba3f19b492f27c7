"""
Tests for item ownership checks and request auth extraction
"""

import uuid
from unittest.mock import MagicMock, patch

import pytest

from sickfits.auth.context import AuthContext
from sickfits.config import ItemAccessPolicy
from sickfits.dbmodels import Items
from sickfits.graphql.access_control import can_modify_item, get_auth_context_from_info


@pytest.fixture
def item():
    return Items(id=uuid.uuid4(), user_id=uuid.uuid4(), title="Cap", description="Blue", price=1)


@pytest.mark.parametrize(
    "is_owner, permissions, policy, allowed",
    [
        (True, ["USER"], ItemAccessPolicy.OWNER_OR_ADMIN, True),
        (False, ["ADMIN"], ItemAccessPolicy.OWNER_OR_ADMIN, True),
        (False, ["USER"], ItemAccessPolicy.OWNER_OR_ADMIN, False),
        (True, ["USER"], ItemAccessPolicy.OWNER_AND_ADMIN, False),
        (False, ["ADMIN"], ItemAccessPolicy.OWNER_AND_ADMIN, False),
        (True, ["USER", "ADMIN"], ItemAccessPolicy.OWNER_AND_ADMIN, True),
    ],
)
def test_can_modify_item(item, make_auth_context, is_owner, permissions, policy, allowed):
    user_id = item.user_id if is_owner else uuid.uuid4()
    auth_context = make_auth_context(user_id=user_id, permissions=permissions)

    assert can_modify_item(item, auth_context, policy) is allowed


def test_anonymous_never_modifies(item):
    for policy in ItemAccessPolicy:
        assert can_modify_item(item, AuthContext(user_id=None), policy) is False


@pytest.mark.asyncio
async def test_missing_request_is_anonymous():
    info = MagicMock()
    info.context = {}

    auth_context = await get_auth_context_from_info(info)

    assert not auth_context.is_authenticated


@pytest.mark.asyncio
async def test_header_and_cookie_are_forwarded(mock_info):
    mock_info.context["request"].cookies = {"token": "cookie-token"}

    with patch("sickfits.graphql.access_control.get_auth_context_optional") as mock_optional:
        mock_optional.return_value = AuthContext(user_id=None)

        await get_auth_context_from_info(mock_info)

    mock_optional.assert_awaited_once_with(
        authorization="Bearer test-token", token_cookie="cookie-token"
    )
