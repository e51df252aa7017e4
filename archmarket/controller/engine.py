"""
Controller Engine - runs a matched route.

Per request:
1. Build ``RequestCtx`` from the request and the app container
2. Run the class-level pipeline, then the route pipeline
3. Instantiate the controller, constructor-injecting services by type hint
4. Bind handler parameters (ctx, path params, serializers, services)
5. Convert the handler result into a ``Response``

Exceptions are not handled here; they propagate to the ASGI adapter,
which hands them to the ``FaultEngine``.
"""

from __future__ import annotations

import inspect
import typing
from typing import Any, Dict

from ..di import Container
from ..request import Request
from ..response import Response
from ..serializers import Serializer
from .base import Controller, RequestCtx
from .router import CompiledRoute


class ControllerEngine:
    """
    Executes controller methods.

    Type hints of controller constructors and handlers are resolved once
    per callable and cached.
    """

    _hints_cache: Dict[Any, Dict[str, Any]] = {}

    def __init__(self, container: Container):
        self.container = container

    async def execute(
        self,
        route: CompiledRoute,
        request: Request,
        path_params: Dict[str, Any],
    ) -> Response:
        ctx = RequestCtx(
            request=request,
            identity=request.state.get("identity"),
            container=self.container,
            state=request.state,
        )

        for node in route.controller_class.pipeline:
            result = await self._safe_call(node, ctx)
            if isinstance(result, Response):
                return result

        for node in route.metadata["pipeline"]:
            result = await self._safe_call(node, ctx)
            if isinstance(result, Response):
                return result

        controller = await self._instantiate(route.controller_class)
        handler = getattr(controller, route.handler_name)
        kwargs = await self._bind_parameters(route, handler, request, ctx, path_params)

        result = await self._safe_call(handler, **kwargs)
        return self._to_response(result, route.metadata["status_code"])

    # ------------------------------------------------------------------
    # Construction and binding
    # ------------------------------------------------------------------

    @classmethod
    def _type_hints(cls, func: Any) -> Dict[str, Any]:
        hints = cls._hints_cache.get(func)
        if hints is None:
            hints = typing.get_type_hints(func)
            hints.pop("return", None)
            cls._hints_cache[func] = hints
        return hints

    async def _instantiate(self, controller_class: type) -> Controller:
        init = controller_class.__init__
        if init is Controller.__init__:
            return controller_class()

        hints = self._type_hints(init)
        kwargs = {}
        for name, param in inspect.signature(init).parameters.items():
            if name == "self" or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            token = hints.get(name)
            if token is not None and self.container.is_registered(token):
                kwargs[name] = await self.container.resolve_async(token)
            elif param.default is inspect.Parameter.empty:
                raise TypeError(
                    f"Cannot inject '{name}' into {controller_class.__name__}: "
                    f"no provider for {getattr(token, '__name__', token)!r}"
                )
        return controller_class(**kwargs)

    @staticmethod
    def _is_serializer_class(annotation: Any) -> bool:
        return inspect.isclass(annotation) and issubclass(annotation, Serializer)

    async def _bind_parameters(
        self,
        route: CompiledRoute,
        handler: Any,
        request: Request,
        ctx: RequestCtx,
        path_params: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Bind handler arguments.

        A parameter typed as a ``Serializer`` subclass receives the
        validated request body; if its name is ``serializer`` or ends with
        ``_serializer`` the validated serializer instance is passed
        instead. ``PATCH`` validates partially.
        """
        hints = self._type_hints(getattr(handler, "__func__", handler))
        kwargs: Dict[str, Any] = {}

        for name, param in route.metadata["signature"].parameters.items():
            if name == "self":
                continue
            if name in ("ctx", "context"):
                kwargs[name] = ctx
                continue
            if name in path_params:
                kwargs[name] = path_params[name]
                continue

            annotation = hints.get(name)
            if self._is_serializer_class(annotation):
                serializer = await annotation.from_request_async(
                    request,
                    partial=request.method == "PATCH",
                    context={"request": request, "identity": ctx.identity, "container": self.container},
                )
                serializer.is_valid(raise_fault=True)
                if name == "serializer" or name.endswith("_serializer"):
                    kwargs[name] = serializer
                else:
                    kwargs[name] = serializer.validated_data
            elif annotation is not None and self.container.is_registered(annotation):
                kwargs[name] = await self.container.resolve_async(annotation)
            elif param.default is inspect.Parameter.empty:
                raise TypeError(f"Cannot bind parameter '{name}' of {route.handler_name}")

        return kwargs

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    async def _safe_call(func: Any, *args: Any, **kwargs: Any) -> Any:
        """Call a sync or async callable."""
        result = func(*args, **kwargs)
        if inspect.isawaitable(result):
            return await result
        return result

    @staticmethod
    def _to_response(result: Any, status: int = 200) -> Response:
        if isinstance(result, Response):
            return result
        if result is None:
            return Response(b"", status=204)
        return Response.json(result, status=status)
