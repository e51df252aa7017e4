"""
Reviews module serializers.
"""

from archmarket.serializers import (
    BooleanField,
    CharField,
    ChoiceField,
    DateTimeField,
    IntegerField,
    JSONField,
    ListField,
    Serializer,
)

from .models import ReviewStatus, ReviewType

RATING_MESSAGE = "Rating must be between 1 and 5"


class ReviewListQuerySerializer(Serializer):
    design = CharField(max_length=64, required=False)
    user = CharField(max_length=64, required=False)
    type = ChoiceField(ReviewType.values, required=False)
    status = ChoiceField(ReviewStatus.values, required=False)


class ReviewImageSerializer(Serializer):
    url = CharField(max_length=2000)
    alt = CharField(max_length=200, required=False, allow_blank=True)


class ReviewCreateSerializer(Serializer):
    type = ChoiceField(
        ReviewType.values,
        error_messages={"required": "Invalid review type", "invalid": "Invalid review type"},
    )
    rating = IntegerField(
        min_value=1,
        max_value=5,
        error_messages={"required": RATING_MESSAGE, "invalid": RATING_MESSAGE},
    )
    title = CharField(min_length=3, max_length=100)
    comment = CharField(min_length=5, max_length=1000)
    design = CharField(max_length=64, required=False, allow_null=True)
    images = ListField(child=ReviewImageSerializer(), required=False)
    tags = ListField(child=CharField(max_length=50), required=False)


class ReviewUpdateSerializer(Serializer):
    rating = IntegerField(
        min_value=1,
        max_value=5,
        required=False,
        error_messages={"invalid": RATING_MESSAGE},
    )
    title = CharField(min_length=3, max_length=100, required=False)
    comment = CharField(min_length=5, max_length=1000, required=False)


class HelpfulVoteSerializer(Serializer):
    helpful = BooleanField()


class ReviewSerializer(Serializer):
    id = CharField()
    user = CharField()
    design = CharField()
    type = CharField()
    rating = IntegerField()
    title = CharField()
    comment = CharField()
    images = JSONField()
    tags = ListField(child=CharField())
    isVerified = BooleanField()
    isFeatured = BooleanField()
    helpfulCount = IntegerField()
    status = CharField()
    createdAt = DateTimeField()
    updatedAt = DateTimeField()


def render_review(review: dict) -> dict:
    return ReviewSerializer(instance=review).data
