"""
Review Faults.
"""

from archmarket.faults import FaultDomain, InvalidArgumentFault, NotFoundFault

REVIEWS_DOMAIN = FaultDomain("reviews", "Review faults")


class ReviewNotFoundFault(NotFoundFault):
    domain = REVIEWS_DOMAIN
    code = "REVIEW_NOT_FOUND"

    def __init__(self, review_id: str):
        super().__init__("Review not found", metadata={"review_id": review_id})


class DesignRequiredFault(InvalidArgumentFault):
    domain = REVIEWS_DOMAIN
    code = "REVIEW_DESIGN_REQUIRED"
    default_message = "Design ID is required for design reviews"


class DuplicateReviewFault(InvalidArgumentFault):
    domain = REVIEWS_DOMAIN
    code = "DUPLICATE_REVIEW"
    default_message = "You have already reviewed this item"
