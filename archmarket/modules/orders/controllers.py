"""
Orders module controllers (request handlers).

Routes (mounted under ``/api``):

    POST /orders                     create an order (any authenticated user)
    GET  /orders                     caller's orders
    GET  /orders/admin/all           every order (admin)
    GET  /orders/stats/summary       counts and revenue (admin)
    GET  /orders/«order_id»          one order (owner or admin)
    PUT  /orders/«order_id»/status   set status / payment status (admin)
    POST /orders/«order_id»/tracking append a tracking update (admin)
    POST /orders/«order_id»/refund   process a refund (admin)
"""

from archmarket.auth import ensure_owner_or_admin, require_admin, require_identity
from archmarket.controller import GET, POST, PUT, Controller, PageNumberPagination, RequestCtx
from archmarket.response import Response

from .serializers import (
    OrderCreateSerializer,
    OrderStatusUpdateSerializer,
    RefundSerializer,
    TrackingUpdateSerializer,
    render_order,
)
from .services import OrderService


class OrdersController(Controller):
    """Checkout and order administration."""

    prefix = "/orders"
    pipeline = [require_identity]
    tags = ["orders"]

    customer_pagination = PageNumberPagination(page_size=10)
    admin_pagination = PageNumberPagination(page_size=20)

    def __init__(self, service: OrderService):
        self.service = service

    async def _render(self, order, *, detail: bool = False) -> dict:
        return render_order(order, await self.service.line_designs([order]), detail=detail)

    async def _render_page(self, orders) -> list:
        designs = await self.service.line_designs(orders)
        return [render_order(o, designs) for o in orders]

    @POST("/", status_code=201)
    async def create_order(self, ctx: RequestCtx, payload: OrderCreateSerializer):
        order = await self.service.place_order(ctx.identity.id, payload)
        return Response.json(
            {"message": "Order created successfully", "order": await self._render(order)},
            status=201,
        )

    @GET("/")
    async def list_orders(self, ctx: RequestCtx):
        """Orders placed by the caller, newest first; ``?status=`` filters."""
        page, size = self.customer_pagination.parse(ctx.query_params)
        orders, total = await self.service.list_for_customer(
            ctx.identity.id,
            status=ctx.query_param("status"),
            offset=self.customer_pagination.offset(page, size),
            limit=size,
        )
        return {
            "orders": await self._render_page(orders),
            "pagination": self.customer_pagination.envelope(page, size, total),
        }

    @GET("/admin/all", pipeline=[require_admin])
    async def list_all_orders(self, ctx: RequestCtx):
        page, size = self.admin_pagination.parse(ctx.query_params)
        orders, total = await self.service.list_all(
            status=ctx.query_param("status"),
            payment_status=ctx.query_param("paymentStatus"),
            offset=self.admin_pagination.offset(page, size),
            limit=size,
        )
        return {
            "orders": await self._render_page(orders),
            "pagination": self.admin_pagination.envelope(page, size, total),
        }

    @GET("/stats/summary", pipeline=[require_admin])
    async def stats_summary(self, ctx: RequestCtx):
        return await self.service.stats_summary()

    @GET("/«order_id»")
    async def get_order(self, ctx: RequestCtx, order_id: str):
        order = await self.service.get_order(order_id)
        ensure_owner_or_admin(ctx, order.customer)
        return await self._render(order, detail=True)

    @PUT("/«order_id»/status", pipeline=[require_admin])
    async def update_status(self, ctx: RequestCtx, order_id: str, payload: OrderStatusUpdateSerializer):
        order = await self.service.update_status(
            order_id, payload["status"], payload.get("paymentStatus")
        )
        return {"message": "Order status updated successfully", "order": await self._render(order)}

    @POST("/«order_id»/tracking", pipeline=[require_admin])
    async def add_tracking_update(self, ctx: RequestCtx, order_id: str, payload: TrackingUpdateSerializer):
        order = await self.service.add_tracking_update(
            order_id,
            payload["status"],
            location=payload.get("location"),
            description=payload.get("description"),
        )
        return {"message": "Tracking update added successfully", "order": await self._render(order)}

    @POST("/«order_id»/refund", pipeline=[require_admin])
    async def process_refund(self, ctx: RequestCtx, order_id: str, payload: RefundSerializer):
        order = await self.service.process_refund(
            order_id, payload["amount"], payload["reason"], processed_by=ctx.identity.id
        )
        return {"message": "Refund processed successfully", "order": await self._render(order)}
