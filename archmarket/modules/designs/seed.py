"""
Sample design catalogue used by ``archmarket seed``.

Seeding is idempotent by title: a design whose title already exists is
left alone.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

from archmarket.db import Query

from .models import DESIGNS
from .services import DesignService

logger = logging.getLogger("archmarket.designs")

_GLTF_SAMPLES = "https://raw.githubusercontent.com/KhronosGroup/glTF-Sample-Models/master/2.0"


def _image(photo: str, alt: str) -> Dict[str, Any]:
    return {
        "url": f"https://images.unsplash.com/{photo}?auto=format&fit=crop&w=600&q=80",
        "alt": alt,
        "isPrimary": True,
    }


def _specs(dimensions, materials, colors, features) -> Dict[str, Any]:
    width, height, depth = dimensions
    return {
        "dimensions": {"width": width, "height": height, "depth": depth, "unit": "meters"},
        "materials": materials,
        "colors": colors,
        "features": features,
    }


SAMPLE_DESIGNS: List[Dict[str, Any]] = [
    {
        "title": "Modern Villa 2D Plan",
        "description": "A beautiful modern villa 2D floor plan with open living spaces and a pool.",
        "category": "residential",
        "style": "modern",
        "price": 199,
        "images": [_image("photo-1506744038136-46273834b3fb", "Modern Villa 2D Plan")],
        "specifications": _specs((20, 10, 0), ["concrete", "glass"], ["white", "gray"], ["pool", "open living"]),
        "tags": ["villa", "2d", "modern"],
        "status": "published",
        "isFeatured": True,
        "license": "personal",
        "usageRights": "Single use license",
    },
    {
        "title": "Contemporary Office 3D Model",
        "description": "A 3D model of a contemporary office space, perfect for commercial projects.",
        "category": "commercial",
        "style": "contemporary",
        "price": 299,
        "images": [_image("photo-1464983953574-0892a716854b", "Contemporary Office")],
        "model3d": {
            "file": f"{_GLTF_SAMPLES}/Box/glTF-Binary/Box.glb",
            "format": "glb",
            "size": 0,
            "previewUrl": f"{_GLTF_SAMPLES}/Box/screenshot/screenshot.png",
        },
        "specifications": _specs(
            (30, 15, 20), ["glass", "steel"], ["blue", "gray"], ["open workspace", "meeting rooms"]
        ),
        "tags": ["office", "3d", "contemporary"],
        "status": "published",
        "isFeatured": True,
        "license": "commercial",
        "usageRights": "Commercial use license",
    },
    {
        "title": "Minimalist Apartment 2D Plan",
        "description": "A clean and minimalist apartment layout, ideal for urban living.",
        "category": "residential",
        "style": "minimalist",
        "price": 99,
        "images": [_image("photo-1512918728675-ed5a9ecdebfd", "Minimalist Apartment 2D Plan")],
        "specifications": _specs((10, 8, 0), ["wood", "concrete"], ["white", "beige"], ["balcony", "open kitchen"]),
        "tags": ["apartment", "2d", "minimalist"],
        "status": "published",
        "isFeatured": False,
        "license": "personal",
        "usageRights": "Single use license",
    },
    {
        "title": "3D Pavilion Model",
        "description": "A detailed 3D model of a pavilion, suitable for landscape and event projects.",
        "category": "landscape",
        "style": "modern",
        "price": 149,
        "images": [_image("photo-1500534314209-a25ddb2bd429", "3D Pavilion")],
        "model3d": {
            "file": f"{_GLTF_SAMPLES}/DamagedHelmet/glTF-Binary/DamagedHelmet.glb",
            "format": "glb",
            "size": 0,
            "previewUrl": f"{_GLTF_SAMPLES}/DamagedHelmet/screenshot/screenshot.png",
        },
        "specifications": _specs(
            (12, 6, 12), ["wood", "glass"], ["brown", "transparent"], ["open structure", "event space"]
        ),
        "tags": ["pavilion", "3d", "landscape"],
        "status": "published",
        "isFeatured": False,
        "license": "commercial",
        "usageRights": "Commercial use license",
    },
    {
        "title": "Modern 3D House Model",
        "description": "A realistic 3D model of a modern house, suitable for architectural visualization.",
        "category": "residential",
        "style": "modern",
        "price": 399,
        "images": [_image("photo-1506744038136-46273834b3fb", "Modern 3D House")],
        "model3d": {
            "file": "/assets/forest-house.glb",
            "format": "glb",
            "size": 0,
            "previewUrl": "https://images.unsplash.com/photo-1506744038136-46273834b3fb?auto=format&fit=crop&w=600&q=80",
            "cloudinaryAssetId": "forest-house_omwko3-28-6-2025",
            "cloudinaryCloudName": "dnlgazx4v",
        },
        "specifications": _specs(
            (25, 12, 18), ["brick", "glass", "wood"], ["white", "brown", "gray"], ["garage", "balcony", "garden"]
        ),
        "tags": ["house", "3d", "modern", "residential"],
        "status": "published",
        "isFeatured": True,
        "license": "commercial",
        "usageRights": "Commercial use license",
    },
]


async def seed_designs(service: DesignService, author_id: str) -> Tuple[int, int]:
    """Insert every sample design not already present; returns (inserted, skipped)."""
    inserted = skipped = 0
    for sample in SAMPLE_DESIGNS:
        existing = await service.store.find_one(DESIGNS, Query(where={"title": sample["title"]}))
        if existing is not None:
            logger.info(f"Already exists: {sample['title']}")
            skipped += 1
            continue
        await service.create_design(sample, author_id)
        inserted += 1
    return inserted, skipped
