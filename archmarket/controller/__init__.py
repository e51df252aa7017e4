"""
Controller layer - class-based handlers, route decorators and routing.
"""

from .base import Controller, RequestCtx
from .decorators import DELETE, GET, PATCH, POST, PUT, RouteDecorator
from .engine import ControllerEngine
from .pagination import PageNumberPagination
from .router import CompiledRoute, ControllerRouter, PatternInvalidError, RouteMatch

__all__ = [
    "Controller",
    "RequestCtx",
    "RouteDecorator",
    "ControllerEngine",
    "GET",
    "POST",
    "PUT",
    "PATCH",
    "DELETE",
    "PageNumberPagination",
    "CompiledRoute",
    "ControllerRouter",
    "PatternInvalidError",
    "RouteMatch",
]
