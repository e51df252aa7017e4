"""
Response - JSON-first HTTP response sent over ASGI.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any, Awaitable, Callable, Mapping, Optional


def _json_default_serializer(o):
    """Default JSON serializer for non-standard types."""
    if isinstance(o, Decimal):
        return float(o)
    if isinstance(o, (set, tuple)):
        return list(o)
    if hasattr(o, "isoformat"):
        return o.isoformat()
    return str(o)


class Response:
    """
    HTTP response.

    Content is kept as bytes; ``headers`` are stored lower-cased.
    """

    __slots__ = ("_content", "status", "_headers", "media_type", "encoding")

    def __init__(
        self,
        content: bytes | str = b"",
        status: int = 200,
        headers: Optional[Mapping[str, str]] = None,
        media_type: Optional[str] = None,
        encoding: str = "utf-8",
    ):
        self.encoding = encoding
        self._content = content.encode(encoding) if isinstance(content, str) else content
        self.status = status
        self._headers = {k.lower(): v for k, v in (headers or {}).items()}
        self.media_type = media_type
        if media_type and "content-type" not in self._headers:
            self._headers["content-type"] = media_type

    @classmethod
    def json(
        cls,
        obj: Any,
        status: int = 200,
        *,
        headers: Optional[Mapping[str, str]] = None,
    ) -> "Response":
        """
        Create JSON response.

        Decimals are rendered as numbers and datetimes as ISO-8601 strings.
        """
        content = json.dumps(obj, default=_json_default_serializer, separators=(",", ":"))
        return cls(
            content=content,
            status=status,
            headers=headers,
            media_type="application/json; charset=utf-8",
        )

    @property
    def body(self) -> bytes:
        return self._content

    @property
    def headers(self) -> dict[str, str]:
        return self._headers

    def json_body(self) -> Any:
        """Decode the body back to Python; used by tests and logging."""
        return json.loads(self._content.decode(self.encoding)) if self._content else None

    async def send_asgi(self, send: Callable[[dict], Awaitable[None]]) -> None:
        """Send response via ASGI."""
        headers = dict(self._headers)
        headers.setdefault("content-length", str(len(self._content)))
        await send({
            "type": "http.response.start",
            "status": self.status,
            "headers": [
                (name.encode("latin-1"), value.encode("latin-1"))
                for name, value in headers.items()
            ],
        })
        await send({"type": "http.response.body", "body": self._content, "more_body": False})

    def __repr__(self) -> str:
        return f"<Response status={self.status} media_type={self.media_type!r}>"
