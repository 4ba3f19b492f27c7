"""
Tests for request logging helpers
"""

import pytest

from sickfits.middleware import operation_name_from_payload, sanitize_query_params


def test_sanitize_redacts_sensitive_keys():
    params = {"resetToken": "abc", "password": "pw", "page": "2"}

    assert sanitize_query_params(params) == {
        "resetToken": "[REDACTED]",
        "password": "[REDACTED]",
        "page": "2",
    }


@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"operationName": "SIGNIN_MUTATION", "query": "mutation x { y }"}, "SIGNIN_MUTATION"),
        ({"query": "mutation CreateOrder { createOrder(token: $t) { id } }"}, "mutation:CreateOrder"),
        ({"query": "query AllItems { items { id } }"}, "AllItems"),
        ({"query": "{ items { id } }"}, "unnamed_operation"),
        ({"query": "query IntrospectionQuery { __schema { types { name } } }"}, "__introspection"),
        ({}, None),
    ],
)
def test_operation_name(payload, expected):
    assert operation_name_from_payload(payload) == expected
