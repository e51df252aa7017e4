"""
Controller Method Decorators

HTTP method decorators for controller methods.
Attach metadata without import-time side effects.
"""

from typing import Any, Callable, List, Optional, TypeVar
import inspect


F = TypeVar('F', bound=Callable[..., Any])


class RouteDecorator:
    """
    Base route decorator.

    Attaches metadata to controller methods; the router reads it when the
    application is assembled.
    """

    method: Optional[str] = None

    def __init__(
        self,
        path: str = "/",
        *,
        pipeline: Optional[List[Any]] = None,
        summary: Optional[str] = None,
        tags: Optional[List[str]] = None,
        status_code: int = 200,
    ):
        """
        Args:
            path: URL path template relative to the controller prefix
                  (e.g., "/", "/«order_id»", "/«page:int»")
            pipeline: Guards run before parameter binding, after the
                      controller-level pipeline (e.g. ``[require_admin]``)
            summary: Short description used in route listings
            tags: Extra tags (extends class-level)
            status_code: Default success status
        """
        self.path = path
        self.pipeline = pipeline or []
        self.summary = summary
        self.tags = tags or []
        self.status_code = status_code

    def __call__(self, func: F) -> F:
        if not hasattr(func, '__route_metadata__'):
            func.__route_metadata__ = []

        func.__route_metadata__.append({
            'http_method': self.method,
            'path': self.path,
            'pipeline': self.pipeline,
            'summary': self.summary or func.__name__.replace('_', ' ').title(),
            'description': inspect.getdoc(func) or '',
            'tags': self.tags,
            'status_code': self.status_code,
            'func_name': func.__name__,
            'signature': inspect.signature(func),
        })
        return func


class GET(RouteDecorator):
    method = "GET"


class POST(RouteDecorator):
    method = "POST"


class PUT(RouteDecorator):
    method = "PUT"


class PATCH(RouteDecorator):
    method = "PATCH"


class DELETE(RouteDecorator):
    method = "DELETE"
