"""
Controller Base Class

Provides the base Controller class and RequestCtx abstraction.
"""

from typing import Any, Dict, Optional, TYPE_CHECKING
from dataclasses import dataclass, field

if TYPE_CHECKING:
    from archmarket.auth.core import Identity
    from archmarket.di import Container
    from archmarket.request import Request


@dataclass
class RequestCtx:
    """
    Request context provided to controller methods.

    Attributes:
        request: The HTTP request
        identity: Authenticated identity (None for anonymous callers)
        container: App DI container
        state: Additional state dictionary
    """

    request: "Request"
    identity: Optional["Identity"] = None
    container: Optional["Container"] = None
    state: Dict[str, Any] = field(default_factory=dict)

    @property
    def path(self) -> str:
        return self.request.path

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def query_params(self) -> Dict[str, str]:
        return self.request.query_params

    def query_param(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.request.query_param(key, default)

    async def json(self) -> Any:
        return await self.request.json()


class Controller:
    """
    Base Controller class.

    Controllers are class-based request handlers. One instance is created
    per request; route methods are declared with the ``GET``/``POST``/...
    decorators and receive ``(self, ctx, **path_params)``.

    Services are constructor-injected from the app container by type hint:

        class OrdersController(Controller):
            prefix = "/orders"

            def __init__(self, service: OrderService):
                self.service = service

    Class Attributes:
        prefix: URL prefix for all routes (e.g., "/orders")
        pipeline: Guards run before every route of the controller
        tags: Grouping tags for route listings
    """

    prefix: str = ""
    pipeline: list = []
    tags: list = []

    def __init__(self):
        pass

    @classmethod
    def route_methods(cls):
        """Yield ``(attribute_name, metadata)`` for every decorated method."""
        seen = set()
        for klass in cls.__mro__:
            for name, member in vars(klass).items():
                if name in seen:
                    continue
                for metadata in getattr(member, "__route_metadata__", ()):
                    seen.add(name)
                    yield name, metadata
