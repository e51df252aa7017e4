"""
Auth - Middleware and Guards

``AuthMiddleware`` runs for every request and resolves the bearer token
into an ``Identity`` without rejecting anything; routes decide what they
require by calling the guards below.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..faults import ForbiddenFault, UnauthorizedFault
from .core import Identity
from .tokens import TokenManager

logger = logging.getLogger("archmarket.auth")

AUTH_MISSING = "missing"
AUTH_INVALID = "invalid"


class AuthMiddleware:
    """
    Resolve ``Authorization: Bearer <token>`` on the request.

    Sets ``request.state["identity"]`` (``None`` for anonymous callers) and,
    when no identity was produced, ``request.state["auth_error"]`` to
    ``"missing"`` or ``"invalid"`` so guards can pick the right message.
    """

    def __init__(self, token_manager: TokenManager):
        self.token_manager = token_manager

    async def resolve(self, request: Any) -> Optional[Identity]:
        token = request.auth_credentials("bearer")
        if token is None:
            request.state["identity"] = None
            request.state["auth_error"] = AUTH_MISSING
            return None

        try:
            claims = self.token_manager.validate_access_token(token)
        except ValueError as exc:
            logger.debug("Rejected bearer token on %s %s: %s", request.method, request.path, exc)
            request.state["identity"] = None
            request.state["auth_error"] = AUTH_INVALID
            return None

        identity = Identity.from_claims(claims)
        request.state["identity"] = identity
        request.state["auth_error"] = None
        return identity


def require_identity(ctx: Any) -> Identity:
    """Return the caller's identity or raise 401."""
    if ctx.identity is not None:
        return ctx.identity
    if ctx.request.state.get("auth_error") == AUTH_INVALID:
        raise UnauthorizedFault("Token is not valid", code="TOKEN_INVALID")
    raise UnauthorizedFault()


def require_admin(ctx: Any) -> Identity:
    """Return the caller's identity if it carries the admin role."""
    identity = require_identity(ctx)
    if not identity.is_admin:
        raise ForbiddenFault("Access denied. Admin only.", code="ADMIN_REQUIRED")
    return identity


def ensure_owner_or_admin(ctx: Any, owner_id: Optional[str]) -> Identity:
    """Allow the owner of a resource and admins; everyone else gets 403."""
    identity = require_identity(ctx)
    if identity.is_admin or (owner_id is not None and identity.id == owner_id):
        return identity
    raise ForbiddenFault()
