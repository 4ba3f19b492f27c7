"""Authentication and authorization for Sick Fits."""

from .adapters.base import AuthAdapter, AuthenticationError, Principal
from .context import AuthContext
from .factory import get_auth_adapter
from .middleware import extract_token, get_auth_context, get_auth_context_optional
from .passwords import hash_password, verify_password
from .permissions import has_permission, require_authenticated, require_permission

__all__ = [
    "AuthAdapter",
    "AuthenticationError",
    "Principal",
    "AuthContext",
    "extract_token",
    "get_auth_context",
    "get_auth_context_optional",
    "get_auth_adapter",
    "hash_password",
    "verify_password",
    "has_permission",
    "require_authenticated",
    "require_permission",
]
