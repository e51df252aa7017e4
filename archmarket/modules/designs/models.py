"""
Design catalogue model.

Designs are stored as plain documents in the ``designs`` collection;
``new_design`` fills the defaults a freshly created design carries.
"""

from __future__ import annotations

import copy
from typing import Any, Dict

from ..shared.enums import TextChoices

DESIGNS = "designs"
FAVORITES = "favorites"

FEATURED_LIMIT = 6


class DesignCategory(TextChoices):
    RESIDENTIAL = "residential", "Residential"
    COMMERCIAL = "commercial", "Commercial"
    LANDSCAPE = "landscape", "Landscape"
    INTERIOR = "interior", "Interior"
    URBAN_PLANNING = "urban-planning", "Urban planning"
    SUSTAINABLE = "sustainable", "Sustainable"
    MODERN = "modern", "Modern"
    CLASSICAL = "classical", "Classical"
    MINIMALIST = "minimalist", "Minimalist"
    LUXURY = "luxury", "Luxury"


class DesignStyle(TextChoices):
    MODERN = "modern", "Modern"
    CLASSICAL = "classical", "Classical"
    CONTEMPORARY = "contemporary", "Contemporary"
    TRADITIONAL = "traditional", "Traditional"
    MINIMALIST = "minimalist", "Minimalist"
    LUXURY = "luxury", "Luxury"
    ECO_FRIENDLY = "eco-friendly", "Eco-friendly"
    INDUSTRIAL = "industrial", "Industrial"
    MEDITERRANEAN = "mediterranean", "Mediterranean"
    SCANDINAVIAN = "scandinavian", "Scandinavian"


class DesignStatus(TextChoices):
    DRAFT = "draft", "Draft"
    PUBLISHED = "published", "Published"
    ARCHIVED = "archived", "Archived"


class ModelFormat(TextChoices):
    GLTF = "gltf"
    GLB = "glb"
    OBJ = "obj"
    FBX = "fbx"
    DAE = "dae"


class DesignSortField(TextChoices):
    PRICE = "price"
    CREATED_AT = "createdAt"
    VIEW_COUNT = "viewCount"
    DOWNLOAD_COUNT = "downloadCount"
    RATING = "rating"

    @property
    def path(self) -> str:
        """Document path the sort runs on."""
        return "rating.average" if self is DesignSortField.RATING else self.value


DESIGN_DEFAULTS: Dict[str, Any] = {
    "currency": "USD",
    "images": [],
    "tags": [],
    "status": DesignStatus.DRAFT.value,
    "isFeatured": False,
    "downloadCount": 0,
    "viewCount": 0,
    "rating": {"average": 0, "count": 0},
    "license": "personal",
    "usageRights": "Single use license",
    "relatedDesigns": [],
}


def new_design(data: Dict[str, Any], author_id: str) -> Dict[str, Any]:
    """Document for a new design: defaults, then *data*, then the author."""
    document = copy.deepcopy(DESIGN_DEFAULTS)
    document.update(copy.deepcopy(data))
    document["author"] = author_id
    return document


def running_average(average: float, count: int, new_rating: float) -> Dict[str, Any]:
    """
    Fold one more rating into ``{"average", "count"}``.

    >>> running_average(4.0, 1, 5)
    {'average': 4.5, 'count': 2}
    """
    total = average * count + new_rating
    count += 1
    return {"average": total / count, "count": count}
