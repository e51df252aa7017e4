"""
Faults - Request-facing taxonomy.

Every fault that can reach a client belongs to one of these kinds.
Module faults subclass them and set their own ``domain`` and ``code``:

    ValidationFault            malformed input, field-keyed messages
    NotFoundFault              referenced entity absent
    UnauthorizedFault          missing or invalid bearer credential
    ForbiddenFault             authenticated but not owner/admin
    UnavailableFault           referenced entity not in a usable state
    InvalidArgumentFault       semantically invalid enum value or amount
    CapacityFault              a bounded resource is exhausted
    RequestTimeoutFault        the request exceeded the boundary time limit
    InternalFault              unexpected failure, never exposed verbatim
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .core import Fault, FaultDomain, Severity


class _TaxonomyFault(Fault):
    """Shared constructor: message first, class attributes for the rest."""

    code = "FAULT"
    domain = FaultDomain.SYSTEM
    severity = Severity.WARN
    default_message = "Request failed"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        code: Optional[str] = None,
        domain: Optional[FaultDomain] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            code=code or self.code,
            message=message or self.default_message,
            domain=domain or self.domain,
            severity=self.severity,
            public=True,
            metadata=metadata,
        )


class ValidationFault(_TaxonomyFault):
    """
    Raised when declarative validation fails.

    Attributes:
        errors: ``{field_name: [messages]}``; nested serializers produce
            nested dicts, list fields produce ``{index: {...}}`` entries.
    """

    code = "VALIDATION_FAILED"
    domain = FaultDomain.VALIDATION
    severity = Severity.INFO
    default_message = "Validation failed"

    def __init__(self, errors: Dict[str, Any], *, message: Optional[str] = None):
        self.errors = errors
        super().__init__(message, metadata={"errors": errors})

    def flat_errors(self) -> List[Dict[str, str]]:
        """Flatten nested errors into ``[{"field": "a.b", "message": ...}]``."""
        flat: List[Dict[str, str]] = []
        _flatten(self.errors, "", flat)
        return flat

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


def _flatten(errors: Any, prefix: str, out: List[Dict[str, str]]) -> None:
    if isinstance(errors, dict):
        for key, value in errors.items():
            path = f"{prefix}.{key}" if prefix else str(key)
            _flatten(value, path, out)
    elif isinstance(errors, (list, tuple)):
        for item in errors:
            if isinstance(item, (dict, list, tuple)):
                _flatten(item, prefix, out)
            else:
                out.append({"field": prefix or "__all__", "message": str(item)})
    else:
        out.append({"field": prefix or "__all__", "message": str(errors)})


class NotFoundFault(_TaxonomyFault):
    code = "NOT_FOUND"
    default_message = "Resource not found"


class RouteNotFoundFault(NotFoundFault):
    code = "ROUTE_NOT_FOUND"
    domain = FaultDomain.ROUTING
    severity = Severity.INFO
    default_message = "Route not found"


class UnauthorizedFault(_TaxonomyFault):
    code = "UNAUTHORIZED"
    domain = FaultDomain.SECURITY
    default_message = "No token, authorization denied"


class ForbiddenFault(_TaxonomyFault):
    code = "FORBIDDEN"
    domain = FaultDomain.SECURITY
    default_message = "Access denied"


class UnavailableFault(_TaxonomyFault):
    code = "UNAVAILABLE"
    default_message = "Resource is not available"


class InvalidArgumentFault(_TaxonomyFault):
    code = "INVALID_ARGUMENT"
    default_message = "Invalid argument"


class CapacityFault(_TaxonomyFault):
    code = "CAPACITY_EXCEEDED"
    severity = Severity.ERROR
    default_message = "Capacity exceeded"


class RequestTimeoutFault(_TaxonomyFault):
    """The request outlived ``server.request_timeout`` and was cancelled."""

    code = "REQUEST_TIMEOUT"
    severity = Severity.ERROR
    default_message = "Request timed out"


class InternalFault(Fault):
    """Unexpected failure. The message is logged, never returned."""

    code = "INTERNAL"
    domain = FaultDomain.SYSTEM

    def __init__(
        self,
        message: str = "Server error",
        *,
        domain: Optional[FaultDomain] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            code=self.code,
            message=message,
            domain=domain or self.domain,
            severity=Severity.ERROR,
            public=False,
            metadata=metadata,
        )


class StoreFault(InternalFault):
    """Entity store failure, normalized so driver errors never leak."""

    code = "STORE_FAILURE"

    def __init__(self, operation: str, reason: str, **metadata: Any):
        super().__init__(
            f"Store operation '{operation}' failed: {reason}",
            domain=FaultDomain.STORE,
            metadata={"operation": operation, **metadata},
        )
