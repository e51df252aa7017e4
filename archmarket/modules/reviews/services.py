"""
Reviews module services.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from archmarket.db import DocumentStore, Query

from ..designs.services import DesignService
from .faults import DesignRequiredFault, DuplicateReviewFault, ReviewNotFoundFault
from .models import REVIEWS, ReviewStatus, ReviewType, helpful_count, record_vote

logger = logging.getLogger("archmarket.reviews")


class ReviewService:
    """
    Review submission and moderation.

    Approving a design review folds its rating into the design's running
    average through ``DesignService.update_rating``.
    """

    def __init__(self, store: DocumentStore, designs: DesignService):
        self.store = store
        self.designs = designs

    async def list_reviews(
        self,
        filters: Dict[str, Any],
        *,
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[Dict[str, Any]], int]:
        where = {k: v for k, v in filters.items() if k in ("design", "user", "type", "status") and v}
        reviews = await self.store.find(REVIEWS, Query(where=where, offset=offset, limit=limit))
        total = await self.store.count(REVIEWS, Query(where=where))
        return reviews, total

    async def get_review(self, review_id: str) -> Dict[str, Any]:
        review = await self.store.get(REVIEWS, review_id)
        if review is None:
            raise ReviewNotFoundFault(review_id)
        return review

    async def submit_review(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        design_id: Optional[str] = data.get("design")
        if data["type"] == ReviewType.DESIGN.value:
            if not design_id:
                raise DesignRequiredFault()
            await self.designs.get_design(design_id)

        duplicate = await self.store.find_one(
            REVIEWS, Query(where={"user": user_id, "design": design_id, "type": data["type"]})
        )
        if duplicate is not None:
            raise DuplicateReviewFault()

        review = await self.store.insert(REVIEWS, {
            "user": user_id,
            "design": design_id,
            "type": data["type"],
            "rating": data["rating"],
            "title": data["title"],
            "comment": data["comment"],
            "images": data.get("images", []),
            "tags": data.get("tags", []),
            "helpful": [],
            "helpfulCount": 0,
            "isVerified": False,
            "isFeatured": False,
            "status": ReviewStatus.PENDING.value,
        })
        logger.info(f"Review {review['id']} submitted by {user_id} ({review['type']})")
        return review

    async def _mutate(self, review_id: str, mutate) -> Dict[str, Any]:
        review = await self.store.update(REVIEWS, review_id, mutate)
        if review is None:
            raise ReviewNotFoundFault(review_id)
        return review

    async def update_review(self, review_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Apply an edit; the review goes back to moderation."""
        def mutate(doc):
            doc.update(changes)
            doc["status"] = ReviewStatus.PENDING.value
            return doc

        return await self._mutate(review_id, mutate)

    async def delete_review(self, review_id: str) -> None:
        if not await self.store.delete(REVIEWS, review_id):
            raise ReviewNotFoundFault(review_id)

    async def approve(self, review_id: str) -> Dict[str, Any]:
        newly_approved = []

        def mutate(doc):
            if doc.get("status") != ReviewStatus.APPROVED.value:
                newly_approved.append(True)
            doc["status"] = ReviewStatus.APPROVED.value
            return doc

        review = await self._mutate(review_id, mutate)
        if newly_approved and review.get("type") == ReviewType.DESIGN.value and review.get("design"):
            await self.designs.update_rating(review["design"], review["rating"])
        logger.info(f"Review {review_id} approved")
        return review

    async def reject(self, review_id: str) -> Dict[str, Any]:
        def mutate(doc):
            doc["status"] = ReviewStatus.REJECTED.value
            return doc

        return await self._mutate(review_id, mutate)

    async def vote_helpful(self, review_id: str, user_id: str, helpful: bool) -> Dict[str, Any]:
        def mutate(doc):
            doc["helpful"] = record_vote(doc.get("helpful", []), user_id, helpful)
            doc["helpfulCount"] = helpful_count(doc["helpful"])
            return doc

        return await self._mutate(review_id, mutate)
