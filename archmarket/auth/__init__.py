"""
Auth - bearer tokens, identities and role guards.
"""

from .core import Identity, Role
from .guards import AuthMiddleware, ensure_owner_or_admin, require_admin, require_identity
from .tokens import KeyDescriptor, KeyRing, KeyStatus, TokenConfig, TokenManager

__all__ = [
    "Identity",
    "Role",
    "AuthMiddleware",
    "require_identity",
    "require_admin",
    "ensure_owner_or_admin",
    "KeyDescriptor",
    "KeyRing",
    "KeyStatus",
    "TokenConfig",
    "TokenManager",
]
