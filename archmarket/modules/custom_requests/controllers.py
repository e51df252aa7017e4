"""
Custom requests module controllers.

Clients see and edit only their own requests; admins see everything,
move requests through their status and may leave internal notes that
clients never receive.
"""

from archmarket.auth import ensure_owner_or_admin, require_admin, require_identity
from archmarket.controller import DELETE, GET, POST, PUT, Controller, PageNumberPagination, RequestCtx

from .faults import InternalNoteForbiddenFault
from .models import visible_communications
from .serializers import (
    CommunicationSerializer,
    CustomRequestCreateSerializer,
    CustomRequestUpdateSerializer,
    StatusSerializer,
    render_request,
)
from .services import CustomRequestService


def _render(ctx: RequestCtx, document: dict) -> dict:
    messages = visible_communications(document, include_internal=ctx.identity.is_admin)
    return render_request(document, communications=messages)


class CustomRequestsController(Controller):
    prefix = "/custom-requests"
    pipeline = [require_identity]
    tags = ["custom-requests"]

    pagination = PageNumberPagination(page_size=10, max_page_size=50)

    def __init__(self, service: CustomRequestService):
        self.service = service

    @POST("/", status_code=201)
    async def submit(self, ctx: RequestCtx, payload: CustomRequestCreateSerializer):
        created = await self.service.submit(ctx.identity.id, payload)
        return {"message": "Custom request submitted", "customRequest": _render(ctx, created)}

    @GET("/")
    async def list_requests(self, ctx: RequestCtx):
        page, size = self.pagination.parse(ctx.query_params)
        found, total = await self.service.list_requests(
            client_id=None if ctx.identity.is_admin else ctx.identity.id,
            status=ctx.query_param("status"),
            category=ctx.query_param("category"),
            offset=self.pagination.offset(page, size),
            limit=size,
        )
        return {
            "requests": [_render(ctx, doc) for doc in found],
            "pagination": self.pagination.envelope(page, size, total),
        }

    @GET("/«request_id»")
    async def get_request(self, ctx: RequestCtx, request_id: str):
        found = await self.service.get_request(request_id)
        ensure_owner_or_admin(ctx, found["client"])
        return _render(ctx, found)

    @PUT("/«request_id»")
    async def update_request(self, ctx: RequestCtx, request_id: str):
        found = await self.service.get_request(request_id)
        ensure_owner_or_admin(ctx, found["client"])

        serializer = await CustomRequestUpdateSerializer.from_request_async(ctx.request, partial=True)
        serializer.is_valid(raise_fault=True)
        updated = await self.service.update_request(request_id, serializer.validated_data)
        return {"message": "Custom request updated", "customRequest": _render(ctx, updated)}

    @DELETE("/«request_id»")
    async def delete_request(self, ctx: RequestCtx, request_id: str):
        found = await self.service.get_request(request_id)
        ensure_owner_or_admin(ctx, found["client"])
        await self.service.delete_request(request_id)
        return {"message": "Custom request deleted"}

    @PUT("/«request_id»/status", pipeline=[require_admin])
    async def set_status(self, ctx: RequestCtx, request_id: str, payload: StatusSerializer):
        updated = await self.service.set_status(request_id, payload["status"])
        return {"message": "Status updated", "customRequest": _render(ctx, updated)}

    @POST("/«request_id»/communications", status_code=201)
    async def add_communication(self, ctx: RequestCtx, request_id: str, payload: CommunicationSerializer):
        found = await self.service.get_request(request_id)
        ensure_owner_or_admin(ctx, found["client"])
        if payload["isInternal"] and not ctx.identity.is_admin:
            raise InternalNoteForbiddenFault()

        updated = await self.service.add_communication(
            request_id, ctx.identity.id, payload["message"], is_internal=payload["isInternal"]
        )
        return {"message": "Message sent", "customRequest": _render(ctx, updated)}
