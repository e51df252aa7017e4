"""
Request - ASGI HTTP request wrapper.

Body is read once and cached; JSON parsing is size-limited and maps
malformed payloads to a 400 fault.
"""

from __future__ import annotations

import json as stdlib_json
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import parse_qs

from .faults import InvalidArgumentFault, ValidationFault


class InvalidJSON(ValidationFault):
    """Malformed JSON body (400)."""

    code = "INVALID_JSON"

    def __init__(self, reason: str):
        super().__init__({"body": [reason]}, message="Invalid JSON payload")


class PayloadTooLarge(InvalidArgumentFault):
    code = "PAYLOAD_TOO_LARGE"
    default_message = "Payload too large"


class Request:
    """
    HTTP request.

    Attributes:
        scope: ASGI scope
        state: per-request scratch space (route match, identity, ...)
    """

    json_max_size = 1024 * 1024

    def __init__(self, scope: dict, receive: Callable):
        self.scope = scope
        self._receive = receive
        self._body: Optional[bytes] = None
        self._json: Any = None
        self._query: Optional[Dict[str, List[str]]] = None
        self._headers: Optional[Dict[str, str]] = None
        self.state: Dict[str, Any] = {}

    @property
    def method(self) -> str:
        return self.scope["method"].upper()

    @property
    def path(self) -> str:
        return self.scope.get("path", "/")

    @property
    def query_string(self) -> str:
        raw = self.scope.get("query_string", b"")
        return raw.decode("latin-1") if isinstance(raw, bytes) else raw

    @property
    def query(self) -> Dict[str, List[str]]:
        if self._query is None:
            self._query = parse_qs(self.query_string, keep_blank_values=False)
        return self._query

    @property
    def query_params(self) -> Dict[str, str]:
        """Last value per key, the shape controllers usually want."""
        return {key: values[-1] for key, values in self.query.items()}

    def query_param(self, name: str, default: Optional[str] = None) -> Optional[str]:
        values = self.query.get(name)
        return values[-1] if values else default

    @property
    def headers(self) -> Dict[str, str]:
        if self._headers is None:
            self._headers = {
                name.decode("latin-1").lower(): value.decode("latin-1")
                for name, value in self.scope.get("headers", [])
            }
        return self._headers

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(name.lower(), default)

    def content_type(self) -> Optional[str]:
        return self.header("content-type")

    def auth_credentials(self, scheme: str = "bearer") -> Optional[str]:
        """Credentials of an ``Authorization: <scheme> <credentials>`` header."""
        auth = self.header("authorization")
        if not auth:
            return None
        parts = auth.strip().split(None, 1)
        if len(parts) != 2 or parts[0].lower() != scheme.lower():
            return None
        return parts[1].strip() or None

    async def body(self) -> bytes:
        if self._body is None:
            chunks = []
            more_body = True
            while more_body:
                message = await self._receive()
                if message["type"] == "http.disconnect":
                    break
                chunks.append(message.get("body", b""))
                more_body = message.get("more_body", False)
            self._body = b"".join(chunks)
        return self._body

    async def json(self) -> Any:
        """
        Parse request body as JSON.

        An empty body parses to ``{}``.

        Raises:
            InvalidJSON: malformed payload
            PayloadTooLarge: body exceeds ``json_max_size``
        """
        if self._json is not None:
            return self._json

        body_bytes = await self.body()
        if len(body_bytes) > self.json_max_size:
            raise PayloadTooLarge(metadata={"max_allowed": self.json_max_size})
        if not body_bytes.strip():
            self._json = {}
            return self._json

        try:
            self._json = stdlib_json.loads(body_bytes.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise InvalidJSON(f"Invalid UTF-8 in JSON payload: {e}")
        except stdlib_json.JSONDecodeError as e:
            raise InvalidJSON(f"Invalid JSON: {e}")
        return self._json
