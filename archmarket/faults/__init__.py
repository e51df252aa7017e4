"""
Faults - structured errors for archmarket.

Faults are typed exceptions with a stable code, a domain and a severity.
They are raised anywhere in the service and turned into HTTP responses
in exactly one place, the ``FaultEngine`` at the ASGI boundary.
"""

from .core import (
    Fault,
    FaultContext,
    FaultDomain,
    Severity,
)
from .domains import (
    CapacityFault,
    ForbiddenFault,
    InternalFault,
    InvalidArgumentFault,
    NotFoundFault,
    RouteNotFoundFault,
    RequestTimeoutFault,
    StoreFault,
    UnauthorizedFault,
    UnavailableFault,
    ValidationFault,
)
from .handlers import (
    ExceptionAdapter,
    FaultEngine,
    LoggingHandler,
    ResponseMapper,
)

__all__ = [
    # Core
    "Fault",
    "FaultContext",
    "FaultDomain",
    "Severity",
    # Taxonomy
    "CapacityFault",
    "ForbiddenFault",
    "InternalFault",
    "InvalidArgumentFault",
    "NotFoundFault",
    "RouteNotFoundFault",
    "RequestTimeoutFault",
    "StoreFault",
    "UnauthorizedFault",
    "UnavailableFault",
    "ValidationFault",
    # Handlers
    "ExceptionAdapter",
    "FaultEngine",
    "LoggingHandler",
    "ResponseMapper",
]
