"""
Auth - Core Types

The authenticated principal handed to controllers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Role(str, Enum):
    """Roles carried in bearer tokens."""
    CUSTOMER = "customer"
    ADMIN = "admin"


@dataclass(frozen=True)
class Identity:
    """
    Authenticated principal.

    Immutable once created. ``attributes`` holds the verified token claims
    the service cares about (``roles``, ``token_id``).
    """
    id: str
    attributes: dict[str, Any] = field(default_factory=dict)

    def get_attribute(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def has_role(self, role: str) -> bool:
        """Check if identity has role."""
        return role in self.get_attribute("roles", [])

    @property
    def is_admin(self) -> bool:
        return self.has_role(Role.ADMIN.value)

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> Identity:
        """Build an identity from validated token claims."""
        roles = claims.get("roles") or [Role.CUSTOMER.value]
        return cls(
            id=str(claims["sub"]),
            attributes={"roles": list(roles), "token_id": claims.get("jti")},
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "attributes": dict(self.attributes)}
