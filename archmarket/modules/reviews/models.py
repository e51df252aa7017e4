"""
Review model.
"""

from __future__ import annotations

from typing import Any, Dict, List

from ..shared.enums import TextChoices

REVIEWS = "reviews"


class ReviewType(TextChoices):
    DESIGN = "design", "Design"
    SERVICE = "service", "Service"
    OVERALL = "overall", "Overall"


class ReviewStatus(TextChoices):
    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"


def record_vote(votes: List[Dict[str, Any]], user_id: str, helpful: bool) -> List[Dict[str, Any]]:
    """Replace *user_id*'s previous vote, if any, with the new one."""
    kept = [vote for vote in votes if vote.get("user") != user_id]
    kept.append({"user": user_id, "helpful": helpful})
    return kept


def helpful_count(votes: List[Dict[str, Any]]) -> int:
    return sum(1 for vote in votes if vote.get("helpful"))
