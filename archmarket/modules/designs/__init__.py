"""
Designs module - the architecture design catalogue.

Components:
- Controllers: DesignsController (``/designs``)
- Services: DesignService (catalogue queries, admin CRUD, favorites, counters)
- Faults: DesignNotFoundFault, AlreadyFavoritedFault
- Seed: SAMPLE_DESIGNS, seed_designs
"""

from .controllers import DesignsController
from .faults import AlreadyFavoritedFault, DesignNotFoundFault
from .models import DESIGNS, FAVORITES, DesignCategory, DesignStatus, DesignStyle, ModelFormat
from .seed import SAMPLE_DESIGNS, seed_designs
from .services import DesignService

__all__ = [
    "DesignsController",
    "DesignService",
    "DesignNotFoundFault",
    "AlreadyFavoritedFault",
    "DESIGNS",
    "FAVORITES",
    "DesignCategory",
    "DesignStatus",
    "DesignStyle",
    "ModelFormat",
    "SAMPLE_DESIGNS",
    "seed_designs",
]
