"""
Reviews module controllers.
"""

from archmarket.auth import ensure_owner_or_admin, require_admin, require_identity
from archmarket.controller import DELETE, GET, POST, PUT, Controller, PageNumberPagination, RequestCtx

from .serializers import (
    HelpfulVoteSerializer,
    ReviewCreateSerializer,
    ReviewListQuerySerializer,
    ReviewUpdateSerializer,
    render_review,
)
from .services import ReviewService


class ReviewsController(Controller):
    prefix = "/reviews"
    tags = ["reviews"]

    pagination = PageNumberPagination(page_size=10, max_page_size=50, strict=True)

    def __init__(self, service: ReviewService):
        self.service = service

    @GET("/")
    async def list_reviews(self, ctx: RequestCtx):
        page, size = self.pagination.parse(ctx.query_params)
        query = ReviewListQuerySerializer(data={k: v for k, v in ctx.query_params.items() if v})
        query.is_valid(raise_fault=True)
        reviews, total = await self.service.list_reviews(
            query.validated_data,
            offset=self.pagination.offset(page, size),
            limit=size,
        )
        return {
            "reviews": [render_review(r) for r in reviews],
            "pagination": self.pagination.envelope(page, size, total),
        }

    @GET("/«review_id»")
    async def get_review(self, ctx: RequestCtx, review_id: str):
        return render_review(await self.service.get_review(review_id))

    @POST("/", pipeline=[require_identity], status_code=201)
    async def submit_review(self, ctx: RequestCtx, payload: ReviewCreateSerializer):
        review = await self.service.submit_review(ctx.identity.id, payload)
        return {"message": "Review submitted for approval", "review": render_review(review)}

    @PUT("/«review_id»", pipeline=[require_identity])
    async def update_review(self, ctx: RequestCtx, review_id: str):
        review = await self.service.get_review(review_id)
        ensure_owner_or_admin(ctx, review["user"])

        serializer = await ReviewUpdateSerializer.from_request_async(ctx.request, partial=True)
        serializer.is_valid(raise_fault=True)
        review = await self.service.update_review(review_id, serializer.validated_data)
        return {"message": "Review updated and submitted for approval", "review": render_review(review)}

    @DELETE("/«review_id»", pipeline=[require_identity])
    async def delete_review(self, ctx: RequestCtx, review_id: str):
        review = await self.service.get_review(review_id)
        ensure_owner_or_admin(ctx, review["user"])
        await self.service.delete_review(review_id)
        return {"message": "Review deleted successfully"}

    @PUT("/«review_id»/approve", pipeline=[require_admin])
    async def approve(self, ctx: RequestCtx, review_id: str):
        await self.service.approve(review_id)
        return {"message": "Review approved"}

    @PUT("/«review_id»/reject", pipeline=[require_admin])
    async def reject(self, ctx: RequestCtx, review_id: str):
        await self.service.reject(review_id)
        return {"message": "Review rejected"}

    @POST("/«review_id»/helpful", pipeline=[require_identity])
    async def vote_helpful(self, ctx: RequestCtx, review_id: str, vote: HelpfulVoteSerializer):
        review = await self.service.vote_helpful(review_id, ctx.identity.id, vote["helpful"])
        return {"message": "Vote recorded", "helpfulCount": review["helpfulCount"]}
