"""
Custom requests module - intake of bespoke design-service requests.

Components:
- Controllers: CustomRequestsController (``/custom-requests``)
- Services: CustomRequestService
- Faults: CustomRequestNotFoundFault, InternalNoteForbiddenFault
"""

from .controllers import CustomRequestsController
from .faults import CustomRequestNotFoundFault, InternalNoteForbiddenFault
from .models import CUSTOM_REQUESTS, ProjectType, RequestCategory, RequestStatus
from .services import CustomRequestService

__all__ = [
    "CustomRequestsController",
    "CustomRequestService",
    "CustomRequestNotFoundFault",
    "InternalNoteForbiddenFault",
    "CUSTOM_REQUESTS",
    "ProjectType",
    "RequestCategory",
    "RequestStatus",
]
