"""
Faults - Boundary handlers.

1. ExceptionAdapter: wrap raw Python exceptions as InternalFault
2. LoggingHandler: log every fault at a severity-derived level
3. ResponseMapper: map faults to HTTP JSON responses

``FaultEngine`` chains them; the ASGI adapter calls ``process`` for
every exception escaping a controller.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..response import Response
from .core import Fault, FaultContext, Severity
from .domains import (
    CapacityFault,
    ForbiddenFault,
    InternalFault,
    InvalidArgumentFault,
    NotFoundFault,
    RequestTimeoutFault,
    UnauthorizedFault,
    UnavailableFault,
    ValidationFault,
)


class ExceptionAdapter:
    """Convert anything that is not a Fault into an ``InternalFault``."""

    def adapt(self, exc: BaseException) -> Fault:
        if isinstance(exc, Fault):
            return exc
        return InternalFault(
            f"{type(exc).__name__}: {exc}",
            metadata={"exception_type": type(exc).__name__},
        )


class LoggingHandler:
    """Log faults with structured metadata."""

    LEVELS = {
        Severity.INFO: logging.INFO,
        Severity.WARN: logging.WARNING,
        Severity.ERROR: logging.ERROR,
        Severity.FATAL: logging.CRITICAL,
    }

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("archmarket.faults")

    def handle(self, ctx: FaultContext) -> None:
        fault = ctx.fault
        self.logger.log(
            self.LEVELS[fault.severity],
            f"[{fault.domain.value}] {fault.code}: {fault.message}",
            exc_info=ctx.cause if isinstance(fault, InternalFault) and ctx.cause else None,
            extra={"fault": ctx.to_dict(), "fingerprint": ctx.fingerprint()},
        )


class ResponseMapper:
    """
    Map faults to HTTP responses.

    Status codes follow the fault kind (first match along the MRO);
    validation faults render ``{"errors": [...]}``, everything else
    renders ``{"message": ..., "code": ...}``. Non-public faults are
    masked as ``Server error``.
    """

    def __init__(self):
        self.status_map = {
            ValidationFault: 400,
            NotFoundFault: 404,
            UnauthorizedFault: 401,
            ForbiddenFault: 403,
            UnavailableFault: 400,
            InvalidArgumentFault: 400,
            CapacityFault: 429,
            RequestTimeoutFault: 504,
            InternalFault: 500,
        }

    def status_for(self, fault: Fault) -> int:
        for klass in type(fault).__mro__:
            if klass in self.status_map:
                return self.status_map[klass]
        return 500

    def handle(self, ctx: FaultContext) -> Response:
        fault = ctx.fault
        status = self.status_for(fault)

        if isinstance(fault, ValidationFault):
            body = {"errors": fault.flat_errors()}
        elif fault.public:
            body = {"message": fault.message, "code": fault.code}
        else:
            body = {"message": "Server error", "code": fault.code, "trace_id": ctx.trace_id}

        return Response.json(body, status=status)


class FaultEngine:
    """
    Process exceptions raised while serving a request.

    Usage:
        ```python
        engine = FaultEngine()
        response = engine.process(exc, method="GET", path="/api/orders")
        ```
    """

    def __init__(
        self,
        adapter: Optional[ExceptionAdapter] = None,
        logger: Optional[LoggingHandler] = None,
        mapper: Optional[ResponseMapper] = None,
    ):
        self.adapter = adapter or ExceptionAdapter()
        self.logging = logger or LoggingHandler()
        self.mapper = mapper or ResponseMapper()

    def process(
        self,
        exc: BaseException,
        *,
        method: Optional[str] = None,
        path: Optional[str] = None,
    ) -> Response:
        fault = self.adapter.adapt(exc)
        cause = exc if fault is not exc else exc.__cause__
        ctx = FaultContext.capture(fault, method=method, path=path, cause=cause)
        self.logging.handle(ctx)
        return self.mapper.handle(ctx)
