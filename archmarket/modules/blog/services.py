"""
Blog module services.

Comments and likes are embedded in the post document; ``commentCount``
and ``likeCount`` are recomputed on every write that touches them.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from archmarket.db import DocumentStore, Query, utcnow

from ..shared.text import contains_text, slugify
from .faults import CommentNotFoundFault, PostNotFoundFault
from .models import POSTS, PostStatus, find_comment, with_like, without_like

logger = logging.getLogger("archmarket.blog")


class BlogService:
    def __init__(self, store: DocumentStore, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.clock = clock or utcnow

    async def list_published(
        self,
        *,
        category: Optional[str] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[Dict[str, Any]], int]:
        where: Dict[str, Any] = {"status": PostStatus.PUBLISHED.value}
        if category:
            where["category"] = category

        def predicate(doc):
            return contains_text(search, doc.get("title"), doc.get("content"), doc.get("tags"))

        posts = await self.store.find(
            POSTS,
            Query(where=where, predicate=predicate, order_by="publishedAt", offset=offset, limit=limit),
        )
        total = await self.store.count(POSTS, Query(where=where, predicate=predicate))
        return posts, total

    async def _mutate(self, post_id: str, mutate) -> Dict[str, Any]:
        post = await self.store.update(POSTS, post_id, mutate)
        if post is None:
            raise PostNotFoundFault(post_id)
        return post

    async def read_post(self, post_id: str) -> Dict[str, Any]:
        """Fetch a post, counting the read."""
        def mutate(doc):
            doc["viewCount"] = doc.get("viewCount", 0) + 1
            return doc

        return await self._mutate(post_id, mutate)

    async def get_post(self, post_id: str) -> Dict[str, Any]:
        post = await self.store.get(POSTS, post_id)
        if post is None:
            raise PostNotFoundFault(post_id)
        return post

    async def create_post(self, data: Dict[str, Any], author_id: str) -> Dict[str, Any]:
        post = await self.store.insert(POSTS, {
            "title": data["title"],
            "slug": slugify(data["title"]),
            "excerpt": data["excerpt"],
            "content": data["content"],
            "category": data["category"],
            "tags": data.get("tags", []),
            "featuredImage": data.get("featuredImage"),
            "images": data.get("images", []),
            "seo": data.get("seo"),
            "author": author_id,
            "status": PostStatus.PUBLISHED.value,
            "isPublished": True,
            "isFeatured": False,
            "publishedAt": self.clock().isoformat(),
            "readTime": 5,
            "viewCount": 0,
            "likeCount": 0,
            "commentCount": 0,
            "comments": [],
            "likes": [],
        })
        logger.info(f"Blog post {post['id']} published: {post['slug']}")
        return post

    async def update_post(self, post_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        def mutate(doc):
            doc.update(changes)
            if "title" in changes:
                doc["slug"] = slugify(changes["title"])
            if doc.get("status") == PostStatus.PUBLISHED.value and not doc.get("publishedAt"):
                doc["publishedAt"] = self.clock().isoformat()
                doc["isPublished"] = True
            return doc

        return await self._mutate(post_id, mutate)

    async def delete_post(self, post_id: str) -> None:
        if not await self.store.delete(POSTS, post_id):
            raise PostNotFoundFault(post_id)

    # ── Comments ─────────────────────────────────────────────────────────

    async def add_comment(self, post_id: str, user_id: str, content: str) -> Dict[str, Any]:
        comment = {
            "id": uuid.uuid4().hex,
            "user": user_id,
            "content": content,
            "createdAt": self.clock().isoformat(),
            "isApproved": False,
        }

        def mutate(doc):
            doc.setdefault("comments", []).append(comment)
            doc["commentCount"] = len(doc["comments"])
            return doc

        await self._mutate(post_id, mutate)
        return comment

    async def get_comment(self, post_id: str, comment_id: str) -> Dict[str, Any]:
        comment = find_comment(await self.get_post(post_id), comment_id)
        if comment is None:
            raise CommentNotFoundFault(comment_id)
        return comment

    async def approve_comment(self, post_id: str, comment_id: str) -> None:
        def mutate(doc):
            comment = find_comment(doc, comment_id)
            if comment is None:
                raise CommentNotFoundFault(comment_id)
            comment["isApproved"] = True
            return doc

        await self._mutate(post_id, mutate)

    async def delete_comment(self, post_id: str, comment_id: str) -> None:
        def mutate(doc):
            if find_comment(doc, comment_id) is None:
                raise CommentNotFoundFault(comment_id)
            doc["comments"] = [c for c in doc["comments"] if c.get("id") != comment_id]
            doc["commentCount"] = len(doc["comments"])
            return doc

        await self._mutate(post_id, mutate)

    # ── Likes ────────────────────────────────────────────────────────────

    async def like(self, post_id: str, user_id: str) -> Dict[str, Any]:
        def mutate(doc):
            doc["likes"] = with_like(doc.get("likes", []), user_id)
            doc["likeCount"] = len(doc["likes"])
            return doc

        return await self._mutate(post_id, mutate)

    async def unlike(self, post_id: str, user_id: str) -> Dict[str, Any]:
        def mutate(doc):
            doc["likes"] = without_like(doc.get("likes", []), user_id)
            doc["likeCount"] = len(doc["likes"])
            return doc

        return await self._mutate(post_id, mutate)
