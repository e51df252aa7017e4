"""
Dependency injection - app-scoped service container.

Services are registered once by the application factory and resolved
by controllers through ``ctx.container``:

    order_service = await ctx.container.resolve_async(OrderService)
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Callable, Dict, Type, TypeVar


T = TypeVar("T")


class ProviderNotFoundError(LookupError):
    """Raised when a token has no registered provider."""

    def __init__(self, token: Any):
        name = getattr(token, "__name__", repr(token))
        super().__init__(f"No provider registered for {name}")
        self.token = token


class Container:
    """
    Minimal singleton container.

    A provider is either a ready instance (``register_value``) or a
    factory, sync or async, called on first resolution and cached
    (``register_factory``). Factories may resolve other tokens.
    """

    def __init__(self):
        self._instances: Dict[Any, Any] = {}
        self._factories: Dict[Any, Callable[["Container"], Any]] = {}
        self._locks: Dict[Any, asyncio.Lock] = {}

    def register_value(self, token: Any, instance: Any) -> None:
        self._instances[token] = instance

    def register_factory(self, token: Any, factory: Callable[["Container"], Any]) -> None:
        self._factories[token] = factory
        self._instances.pop(token, None)

    def is_registered(self, token: Any) -> bool:
        return token in self._instances or token in self._factories

    async def resolve_async(self, token: Type[T]) -> T:
        if token in self._instances:
            return self._instances[token]
        if token not in self._factories:
            raise ProviderNotFoundError(token)

        async with self._locks.setdefault(token, asyncio.Lock()):
            if token not in self._instances:
                instance = self._factories[token](self)
                if inspect.isawaitable(instance):
                    instance = await instance
                self._instances[token] = instance
        return self._instances[token]

    def resolve(self, token: Type[T]) -> T:
        """Sync lookup of an already-built instance."""
        if token in self._instances:
            return self._instances[token]
        raise ProviderNotFoundError(token)
