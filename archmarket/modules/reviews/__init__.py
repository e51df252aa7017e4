"""
Reviews module - customer reviews and their moderation.

Components:
- Controllers: ReviewsController (``/reviews``)
- Services: ReviewService
- Faults: ReviewNotFoundFault, DesignRequiredFault, DuplicateReviewFault
"""

from .controllers import ReviewsController
from .faults import DesignRequiredFault, DuplicateReviewFault, ReviewNotFoundFault
from .models import REVIEWS, ReviewStatus, ReviewType
from .services import ReviewService

__all__ = [
    "ReviewsController",
    "ReviewService",
    "ReviewNotFoundFault",
    "DesignRequiredFault",
    "DuplicateReviewFault",
    "REVIEWS",
    "ReviewStatus",
    "ReviewType",
]
