"""
Faults - Core types and fault taxonomy.

Defines:
- Fault base class (structured fault objects)
- FaultDomain (functional area where a fault originated)
- Severity levels
- FaultContext (runtime context captured at the request boundary)
"""

from __future__ import annotations

import hashlib
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


# ============================================================================
# Severity & Domain
# ============================================================================

class Severity(str, Enum):
    """
    Fault severity levels.

    Determines the log level used when a fault reaches the boundary.
    """
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"


class FaultDomain:
    """
    Fault domains (taxonomy).

    Identifies the functional area where a fault occurred. Modules
    declare their own domain, e.g. ``FaultDomain("orders")``.
    """

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.value = name
        self.description = description

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"FaultDomain(name='{self.name}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, FaultDomain):
            return self.name == other.name
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(self.name)


# Standard Domains
FaultDomain.ROUTING = FaultDomain("routing", "Route matching errors")
FaultDomain.VALIDATION = FaultDomain("validation", "Request validation errors")
FaultDomain.SECURITY = FaultDomain("security", "Authentication and authorization")
FaultDomain.STORE = FaultDomain("store", "Entity store failures")
FaultDomain.SYSTEM = FaultDomain("system", "System level faults")


DOMAIN_DEFAULTS = {
    FaultDomain.ROUTING: {"severity": Severity.INFO, "retryable": False},
    FaultDomain.VALIDATION: {"severity": Severity.INFO, "retryable": False},
    FaultDomain.SECURITY: {"severity": Severity.WARN, "retryable": False},
    FaultDomain.STORE: {"severity": Severity.ERROR, "retryable": False},
    FaultDomain.SYSTEM: {"severity": Severity.ERROR, "retryable": False},
}


# ============================================================================
# Fault - Base Class
# ============================================================================

class Fault(Exception):
    """
    An expected failure with a stable ``code`` and a client-facing message.

    Only ``public`` faults reach clients verbatim; anything else is
    rendered as a generic server error. Module faults subclass one of the
    kinds in ``domains`` and declare ``code`` and ``domain`` on the class::

        class AlreadyFavoritedFault(InvalidArgumentFault):
            domain = DESIGNS_DOMAIN
            code = "ALREADY_FAVORITED"
            default_message = "Design already in favorites"
    """

    def __init__(
        self,
        code: str | None = None,
        message: str | None = None,
        *,
        domain: FaultDomain | None = None,
        severity: Optional[Severity] = None,
        retryable: Optional[bool] = None,
        public: bool = False,
        metadata: Optional[dict[str, Any]] = None,
    ):
        # Fall back to class attributes when not provided
        self.code = code if code is not None else getattr(self, "code", None)
        self.message = message if message is not None else getattr(self, "message", None)
        self.domain = domain if domain is not None else getattr(self, "domain", None)

        if self.code is None or self.message is None or self.domain is None:
            raise TypeError(f"{self.__class__.__name__} missing required code, message, or domain")

        super().__init__(self.message)

        defaults = DOMAIN_DEFAULTS.get(self.domain, {"severity": Severity.ERROR, "retryable": False})
        self.severity = severity or defaults["severity"]
        self.retryable = retryable if retryable is not None else defaults["retryable"]
        self.public = public
        self.metadata = metadata or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"Fault(code={self.code!r}, domain={self.domain.value}, "
            f"severity={self.severity.value}, public={self.public})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize fault for logging."""
        return {
            "code": self.code,
            "message": self.message,
            "domain": self.domain.value,
            "severity": self.severity.value,
            "retryable": self.retryable,
            "public": self.public,
            "metadata": self.metadata,
        }


# ============================================================================
# FaultContext - Runtime Context Wrapper
# ============================================================================

@dataclass(slots=True)
class FaultContext:
    """
    Runtime context for a fault that reached the request boundary.

    Attributes:
        fault: The underlying fault
        trace_id: Unique id for this occurrence
        method: HTTP method of the failing request
        path: Request path
        cause: Original exception when the fault wraps one
    """

    fault: Fault
    trace_id: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    method: Optional[str] = None
    path: Optional[str] = None
    cause: Optional[BaseException] = None

    @classmethod
    def capture(
        cls,
        fault: Fault,
        *,
        method: Optional[str] = None,
        path: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> FaultContext:
        trace_data = f"{fault.code}:{time.time_ns()}"
        trace_id = hashlib.sha256(trace_data.encode()).hexdigest()[:16]
        return cls(fault=fault, trace_id=trace_id, method=method, path=path, cause=cause)

    def fingerprint(self) -> str:
        """Stable hash of code + domain + path, used to group occurrences."""
        data = ":".join([self.fault.code, self.fault.domain.value, self.path or ""])
        return hashlib.sha256(data.encode()).hexdigest()[:16]

    def to_dict(self) -> dict[str, Any]:
        return {
            "fault": self.fault.to_dict(),
            "trace_id": self.trace_id,
            "fingerprint": self.fingerprint(),
            "timestamp": self.timestamp.isoformat(),
            "request": {"method": self.method, "path": self.path},
            "cause": repr(self.cause) if self.cause else None,
        }
