"""
Custom Request Faults.
"""

from archmarket.faults import FaultDomain, ForbiddenFault, NotFoundFault

CUSTOM_REQUESTS_DOMAIN = FaultDomain("custom_requests", "Custom design request faults")


class CustomRequestNotFoundFault(NotFoundFault):
    domain = CUSTOM_REQUESTS_DOMAIN
    code = "CUSTOM_REQUEST_NOT_FOUND"

    def __init__(self, request_id: str):
        super().__init__("Custom request not found", metadata={"request_id": request_id})


class InternalNoteForbiddenFault(ForbiddenFault):
    domain = CUSTOM_REQUESTS_DOMAIN
    code = "INTERNAL_NOTE_FORBIDDEN"
    default_message = "Only admins can post internal notes"
