"""
ASGI adapter - Bridges the ASGI protocol to archmarket's request/response system.

Handles ``http`` and ``lifespan`` scopes. Every HTTP request goes through:

    Request -> AuthMiddleware.resolve -> route match -> ControllerEngine

and any exception raised on the way is turned into a response by the
``FaultEngine``.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Optional

from .auth import AuthMiddleware
from .controller import ControllerEngine, ControllerRouter
from .faults import FaultEngine, RequestTimeoutFault, RouteNotFoundFault
from .request import Request
from .response import Response


class ASGIAdapter:
    """
    ASGI application.

    Args:
        router: Compiled controller routes
        engine: Executes matched routes
        auth: Resolves bearer tokens into identities
        fault_engine: Maps exceptions to responses
        server: Object with async ``startup()`` / ``shutdown()`` run on lifespan
        request_timeout: Seconds a request may run before it is cancelled
            and answered with 504; None disables the limit
    """

    def __init__(
        self,
        router: ControllerRouter,
        engine: ControllerEngine,
        auth: AuthMiddleware,
        fault_engine: Optional[FaultEngine] = None,
        server: Optional[Any] = None,
        request_timeout: Optional[float] = None,
    ):
        self.router = router
        self.engine = engine
        self.auth = auth
        self.fault_engine = fault_engine or FaultEngine()
        self.server = server
        self.request_timeout = request_timeout
        self.logger = logging.getLogger("archmarket.asgi")

    async def __call__(self, scope: dict, receive: Callable, send: Callable):
        scope_type = scope["type"]
        if scope_type == "http":
            await self.handle_http(scope, receive, send)
        elif scope_type == "lifespan":
            await self.handle_lifespan(scope, receive, send)
        else:
            self.logger.warning(f"Unsupported ASGI scope type: {scope_type}")

    async def handle_http(self, scope: dict, receive: Callable, send: Callable):
        started = time.perf_counter()
        request = Request(scope, receive)
        method, path = request.method, request.path

        try:
            response = await asyncio.wait_for(self._dispatch(request), timeout=self.request_timeout)
        except asyncio.TimeoutError:
            timeout = RequestTimeoutFault(metadata={"timeout": self.request_timeout})
            response = self.fault_engine.process(timeout, method=method, path=path)
        except Exception as exc:
            response = self.fault_engine.process(exc, method=method, path=path)

        elapsed_ms = (time.perf_counter() - started) * 1000
        if response.status >= 500:
            self.logger.error(f"{method} {path} -> {response.status} ({elapsed_ms:.1f}ms)")
        else:
            self.logger.info(f"{method} {path} -> {response.status} ({elapsed_ms:.1f}ms)")

        await response.send_asgi(send)

    async def _dispatch(self, request: Request) -> Response:
        await self.auth.resolve(request)

        match = self.router.match(request.method, request.path)
        if match is None:
            raise RouteNotFoundFault(metadata={"method": request.method, "path": request.path})

        request.state["route_pattern"] = match.route.full_path
        request.state["path_params"] = match.params
        return await self.engine.execute(match.route, request, match.params)

    async def handle_lifespan(self, scope: dict, receive: Callable, send: Callable):
        """Handle ASGI lifespan events."""
        while True:
            message = await receive()

            if message["type"] == "lifespan.startup":
                try:
                    if self.server:
                        await self.server.startup()
                    await send({"type": "lifespan.startup.complete"})
                except Exception as e:
                    self.logger.error(f"Startup error: {e}", exc_info=True)
                    await send({"type": "lifespan.startup.failed", "message": str(e)})
                    raise

            elif message["type"] == "lifespan.shutdown":
                try:
                    if self.server:
                        await self.server.shutdown()
                    await send({"type": "lifespan.shutdown.complete"})
                except Exception as e:
                    self.logger.error(f"Shutdown error: {e}", exc_info=True)
                    await send({"type": "lifespan.shutdown.failed", "message": str(e)})
                break
