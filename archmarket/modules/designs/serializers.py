"""
Designs module serializers.
"""

from archmarket.serializers import (
    BooleanField,
    CharField,
    ChoiceField,
    DateTimeField,
    FloatField,
    IntegerField,
    JSONField,
    ListField,
    Serializer,
)

from ..orders.models import LicenseKind
from .models import DesignCategory, DesignSortField, DesignStatus, DesignStyle, ModelFormat

TITLE_MESSAGE = "Title must be between 3 and 200 characters"
DESCRIPTION_MESSAGE = "Description must be at least 10 characters"


class DesignListQuerySerializer(Serializer):
    """Query string of ``GET /designs``; ``page`` and ``limit`` are parsed by the paginator."""

    category = ChoiceField(DesignCategory.values, required=False)
    style = ChoiceField(DesignStyle.values, required=False)
    minPrice = FloatField(
        min_value=0,
        required=False,
        error_messages={"invalid": "Min price must be a positive number"},
    )
    maxPrice = FloatField(
        min_value=0,
        required=False,
        error_messages={"invalid": "Max price must be a positive number"},
    )
    search = CharField(max_length=200, required=False, allow_blank=True)
    sortBy = ChoiceField(DesignSortField.values, default=DesignSortField.CREATED_AT.value)
    sortOrder = ChoiceField(["asc", "desc"], default="desc")


# ── Nested input ─────────────────────────────────────────────────────────

class ImageSerializer(Serializer):
    url = CharField(max_length=2000)
    alt = CharField(max_length=200, required=False, allow_blank=True)
    isPrimary = BooleanField(default=False)


class Model3DSerializer(Serializer):
    file = CharField(
        max_length=2000,
        error_messages={"required": "3D model file is required", "invalid": "3D model file is required"},
    )
    format = ChoiceField(
        ModelFormat.values,
        error_messages={"required": "Invalid 3D model format", "invalid": "Invalid 3D model format"},
    )
    size = IntegerField(min_value=0, required=False)
    previewUrl = CharField(max_length=2000, required=False, allow_blank=True)
    cloudinaryUrl = CharField(max_length=4000, required=False, allow_blank=True)
    cloudinaryAssetId = CharField(max_length=200, required=False, allow_blank=True)
    cloudinaryCloudName = CharField(max_length=200, required=False, allow_blank=True)


class DimensionsSerializer(Serializer):
    width = FloatField(min_value=0, required=False)
    height = FloatField(min_value=0, required=False)
    depth = FloatField(min_value=0, required=False)
    unit = CharField(max_length=20, default="meters")


class SpecificationsSerializer(Serializer):
    dimensions = DimensionsSerializer(required=False)
    materials = ListField(child=CharField(max_length=100), required=False)
    colors = ListField(child=CharField(max_length=100), required=False)
    features = ListField(child=CharField(max_length=200), required=False)


# ── Create / update ──────────────────────────────────────────────────────

class DesignCreateSerializer(Serializer):
    title = CharField(
        min_length=3,
        max_length=200,
        error_messages={"required": TITLE_MESSAGE, "invalid": TITLE_MESSAGE},
    )
    description = CharField(
        min_length=10,
        error_messages={"required": DESCRIPTION_MESSAGE, "invalid": DESCRIPTION_MESSAGE},
    )
    category = ChoiceField(
        DesignCategory.values,
        error_messages={"required": "Invalid category", "invalid": "Invalid category"},
    )
    style = ChoiceField(
        DesignStyle.values,
        error_messages={"required": "Invalid style", "invalid": "Invalid style"},
    )
    price = FloatField(
        min_value=0,
        error_messages={"required": "Price must be a positive number", "invalid": "Price must be a positive number"},
    )
    currency = CharField(max_length=3, required=False)
    images = ListField(child=ImageSerializer(), required=False)
    model3d = Model3DSerializer(
        error_messages={"required": "3D model file is required"},
    )
    specifications = SpecificationsSerializer(required=False)
    tags = ListField(child=CharField(max_length=50), required=False)
    status = ChoiceField(DesignStatus.values, required=False)
    isFeatured = BooleanField(required=False)
    license = ChoiceField(LicenseKind.values, required=False)
    usageRights = CharField(max_length=200, required=False)
    relatedDesigns = ListField(child=CharField(max_length=64), required=False)


class DesignUpdateSerializer(DesignCreateSerializer):
    """Same rules as create; used with ``partial=True``."""


# ── Output ───────────────────────────────────────────────────────────────

class DesignSerializer(Serializer):
    id = CharField()
    title = CharField()
    description = CharField()
    category = CharField()
    style = CharField()
    price = FloatField()
    currency = CharField()
    images = JSONField()
    model3d = JSONField()
    specifications = JSONField()
    tags = ListField(child=CharField())
    status = CharField()
    isFeatured = BooleanField()
    downloadCount = IntegerField()
    viewCount = IntegerField()
    rating = JSONField()
    author = CharField()
    license = CharField()
    usageRights = CharField()
    relatedDesigns = ListField(child=CharField())
    createdAt = DateTimeField()
    updatedAt = DateTimeField()


def render_design(design: dict) -> dict:
    return DesignSerializer(instance=design).data


def render_designs(designs) -> list:
    return DesignSerializer.many(instance=designs).data
