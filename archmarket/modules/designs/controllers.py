"""
Designs module controllers.

Public catalogue reads, admin maintenance and per-user favorites.
"""

from archmarket.auth import require_admin, require_identity
from archmarket.controller import DELETE, GET, POST, PUT, Controller, PageNumberPagination, RequestCtx
from archmarket.response import Response

from .serializers import (
    DesignCreateSerializer,
    DesignListQuerySerializer,
    DesignUpdateSerializer,
    render_design,
    render_designs,
)
from .services import DesignService


class DesignsController(Controller):
    prefix = "/designs"
    tags = ["designs"]

    pagination = PageNumberPagination(page_size=12, max_page_size=50, strict=True)

    def __init__(self, service: DesignService):
        self.service = service

    @GET("/")
    async def list_designs(self, ctx: RequestCtx):
        """
        Published designs.

        Filters: ``category``, ``style``, ``minPrice``, ``maxPrice``,
        ``search``; ordering: ``sortBy`` / ``sortOrder``.
        """
        page, size = self.pagination.parse(ctx.query_params)
        params = {k: v for k, v in ctx.query_params.items() if v != ""}
        query = DesignListQuerySerializer(data=params)
        query.is_valid(raise_fault=True)
        filters = query.validated_data

        designs, total = await self.service.list_published(
            category=filters.get("category"),
            style=filters.get("style"),
            min_price=filters.get("minPrice"),
            max_price=filters.get("maxPrice"),
            search=filters.get("search"),
            sort_by=filters["sortBy"],
            sort_order=filters["sortOrder"],
            offset=self.pagination.offset(page, size),
            limit=size,
        )
        return {
            "designs": render_designs(designs),
            "pagination": self.pagination.envelope(page, size, total),
        }

    @GET("/featured")
    async def featured(self, ctx: RequestCtx):
        return Response.json(render_designs(await self.service.featured()))

    @GET("/categories")
    async def categories(self, ctx: RequestCtx):
        return Response.json(await self.service.categories())

    @GET("/styles")
    async def styles(self, ctx: RequestCtx):
        return Response.json(await self.service.styles())

    @GET("/«design_id»")
    async def get_design(self, ctx: RequestCtx, design_id: str):
        # Anonymous reads do not count as views.
        design = await self.service.get_design(design_id, count_view=ctx.identity is not None)
        return render_design(design)

    @POST("/", pipeline=[require_admin], status_code=201)
    async def create_design(self, ctx: RequestCtx, payload: DesignCreateSerializer):
        design = await self.service.create_design(payload, ctx.identity.id)
        return {"message": "Design created successfully", "design": render_design(design)}

    @PUT("/«design_id»", pipeline=[require_admin])
    async def update_design(self, ctx: RequestCtx, design_id: str):
        serializer = await DesignUpdateSerializer.from_request_async(ctx.request, partial=True)
        serializer.is_valid(raise_fault=True)
        design = await self.service.update_design(design_id, serializer.validated_data)
        return {"message": "Design updated successfully", "design": render_design(design)}

    @DELETE("/«design_id»", pipeline=[require_admin])
    async def delete_design(self, ctx: RequestCtx, design_id: str):
        await self.service.delete_design(design_id)
        return {"message": "Design deleted successfully"}

    @POST("/«design_id»/favorite", pipeline=[require_identity])
    async def add_favorite(self, ctx: RequestCtx, design_id: str):
        await self.service.add_favorite(ctx.identity.id, design_id)
        return {"message": "Design added to favorites"}

    @DELETE("/«design_id»/favorite", pipeline=[require_identity])
    async def remove_favorite(self, ctx: RequestCtx, design_id: str):
        await self.service.remove_favorite(ctx.identity.id, design_id)
        return {"message": "Design removed from favorites"}
