"""
Blog module controllers.
"""

from archmarket.auth import ensure_owner_or_admin, require_admin, require_identity
from archmarket.controller import DELETE, GET, POST, PUT, Controller, PageNumberPagination, RequestCtx

from .serializers import CommentSerializer, PostCreateSerializer, PostUpdateSerializer, render_post
from .services import BlogService


class BlogController(Controller):
    prefix = "/blog"
    tags = ["blog"]

    pagination = PageNumberPagination(page_size=10, max_page_size=50, strict=True)

    def __init__(self, service: BlogService):
        self.service = service

    @GET("/")
    async def list_posts(self, ctx: RequestCtx):
        page, size = self.pagination.parse(ctx.query_params)
        posts, total = await self.service.list_published(
            category=ctx.query_param("category"),
            search=ctx.query_param("search"),
            offset=self.pagination.offset(page, size),
            limit=size,
        )
        return {
            "posts": [render_post(p) for p in posts],
            "pagination": self.pagination.envelope(page, size, total),
        }

    @GET("/«post_id»")
    async def read_post(self, ctx: RequestCtx, post_id: str):
        return render_post(await self.service.read_post(post_id))

    @POST("/", pipeline=[require_admin], status_code=201)
    async def create_post(self, ctx: RequestCtx, payload: PostCreateSerializer):
        post = await self.service.create_post(payload, ctx.identity.id)
        return {"message": "Blog post created", "post": render_post(post)}

    @PUT("/«post_id»", pipeline=[require_admin])
    async def update_post(self, ctx: RequestCtx, post_id: str):
        serializer = await PostUpdateSerializer.from_request_async(ctx.request, partial=True)
        serializer.is_valid(raise_fault=True)
        post = await self.service.update_post(post_id, serializer.validated_data)
        return {"message": "Blog post updated", "post": render_post(post)}

    @DELETE("/«post_id»", pipeline=[require_admin])
    async def delete_post(self, ctx: RequestCtx, post_id: str):
        await self.service.delete_post(post_id)
        return {"message": "Blog post deleted"}

    # ── Comments ─────────────────────────────────────────────────────────

    @POST("/«post_id»/comment", pipeline=[require_identity])
    async def add_comment(self, ctx: RequestCtx, post_id: str, payload: CommentSerializer):
        comment = await self.service.add_comment(post_id, ctx.identity.id, payload["content"])
        return {"message": "Comment submitted for approval", "comment": comment}

    @PUT("/«post_id»/comment/«comment_id»/approve", pipeline=[require_admin])
    async def approve_comment(self, ctx: RequestCtx, post_id: str, comment_id: str):
        await self.service.approve_comment(post_id, comment_id)
        return {"message": "Comment approved"}

    @DELETE("/«post_id»/comment/«comment_id»", pipeline=[require_identity])
    async def delete_comment(self, ctx: RequestCtx, post_id: str, comment_id: str):
        comment = await self.service.get_comment(post_id, comment_id)
        ensure_owner_or_admin(ctx, comment.get("user"))
        await self.service.delete_comment(post_id, comment_id)
        return {"message": "Comment deleted"}

    # ── Likes ────────────────────────────────────────────────────────────

    @POST("/«post_id»/like", pipeline=[require_identity])
    async def like(self, ctx: RequestCtx, post_id: str):
        post = await self.service.like(post_id, ctx.identity.id)
        return {"message": "Post liked", "likeCount": post["likeCount"]}

    @DELETE("/«post_id»/like", pipeline=[require_identity])
    async def unlike(self, ctx: RequestCtx, post_id: str):
        post = await self.service.unlike(post_id, ctx.identity.id)
        return {"message": "Like removed", "likeCount": post["likeCount"]}
