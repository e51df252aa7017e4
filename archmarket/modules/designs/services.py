"""
Designs module services (business logic).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from archmarket.db import DocumentStore, Query

from ..shared.text import contains_text
from .faults import AlreadyFavoritedFault, DesignNotFoundFault
from .models import (
    DESIGNS,
    FAVORITES,
    FEATURED_LIMIT,
    DesignSortField,
    DesignStatus,
    new_design,
    running_average,
)

logger = logging.getLogger("archmarket.designs")


class DesignService:
    """
    Catalogue queries and admin maintenance over the ``designs`` collection.

    Favorites live in their own collection keyed ``<user>:<design>`` so a
    pair can exist at most once.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    # ── Catalogue ────────────────────────────────────────────────────────

    async def list_published(
        self,
        *,
        category: Optional[str] = None,
        style: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        search: Optional[str] = None,
        sort_by: str = DesignSortField.CREATED_AT.value,
        sort_order: str = "desc",
        offset: int = 0,
        limit: int = 12,
    ) -> Tuple[List[Dict[str, Any]], int]:
        where: Dict[str, Any] = {"status": DesignStatus.PUBLISHED.value}
        if category:
            where["category"] = category
        if style:
            where["style"] = style

        def predicate(doc: Dict[str, Any]) -> bool:
            price = doc.get("price", 0)
            if min_price is not None and price < min_price:
                return False
            if max_price is not None and price > max_price:
                return False
            return contains_text(search, doc.get("title"), doc.get("description"), doc.get("tags"))

        query = Query(
            where=where,
            predicate=predicate,
            order_by=DesignSortField(sort_by).path,
            descending=sort_order != "asc",
            offset=offset,
            limit=limit,
        )
        designs = await self.store.find(DESIGNS, query)
        total = await self.store.count(DESIGNS, Query(where=where, predicate=predicate))
        return designs, total

    async def featured(self) -> List[Dict[str, Any]]:
        query = Query(
            where={"status": DesignStatus.PUBLISHED.value, "isFeatured": True},
            limit=FEATURED_LIMIT,
        )
        return await self.store.find(DESIGNS, query)

    async def categories(self) -> List[str]:
        return await self.store.distinct(DESIGNS, "category")

    async def styles(self) -> List[str]:
        return await self.store.distinct(DESIGNS, "style")

    async def get_design(self, design_id: str, *, count_view: bool = False) -> Dict[str, Any]:
        """Fetch one design; ``count_view`` bumps ``viewCount`` in the same write."""
        if count_view:
            design = await self.store.update(DESIGNS, design_id, _increment("viewCount"))
        else:
            design = await self.store.get(DESIGNS, design_id)
        if design is None:
            raise DesignNotFoundFault(design_id)
        return design

    # ── Admin ────────────────────────────────────────────────────────────

    async def create_design(self, data: Dict[str, Any], author_id: str) -> Dict[str, Any]:
        design = await self.store.insert(DESIGNS, new_design(data, author_id))
        logger.info(f"Design {design['id']} created: {design['title']!r}")
        return design

    async def update_design(self, design_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        def mutate(doc: Dict[str, Any]) -> Dict[str, Any]:
            doc.update(changes)
            return doc

        design = await self.store.update(DESIGNS, design_id, mutate)
        if design is None:
            raise DesignNotFoundFault(design_id)
        return design

    async def delete_design(self, design_id: str) -> None:
        if not await self.store.delete(DESIGNS, design_id):
            raise DesignNotFoundFault(design_id)
        for favorite in await self.store.find(FAVORITES, Query(where={"design": design_id})):
            await self.store.delete(FAVORITES, favorite["id"])
        logger.info(f"Design {design_id} deleted")

    # ── Counters ─────────────────────────────────────────────────────────

    async def increment_download(self, design_id: str) -> Dict[str, Any]:
        design = await self.store.update(DESIGNS, design_id, _increment("downloadCount"))
        if design is None:
            raise DesignNotFoundFault(design_id)
        return design

    async def update_rating(self, design_id: str, new_rating: float) -> Dict[str, Any]:
        """Fold *new_rating* into the design's running average."""
        def mutate(doc: Dict[str, Any]) -> Dict[str, Any]:
            rating = doc.get("rating") or {}
            doc["rating"] = running_average(
                rating.get("average", 0), rating.get("count", 0), new_rating
            )
            return doc

        design = await self.store.update(DESIGNS, design_id, mutate)
        if design is None:
            raise DesignNotFoundFault(design_id)
        return design

    # ── Favorites ────────────────────────────────────────────────────────

    async def add_favorite(self, user_id: str, design_id: str) -> None:
        await self.get_design(design_id)
        favorite_id = f"{user_id}:{design_id}"
        if await self.store.get(FAVORITES, favorite_id) is not None:
            raise AlreadyFavoritedFault()
        await self.store.insert(FAVORITES, {"id": favorite_id, "user": user_id, "design": design_id})

    async def remove_favorite(self, user_id: str, design_id: str) -> None:
        await self.get_design(design_id)
        await self.store.delete(FAVORITES, f"{user_id}:{design_id}")


def _increment(field_name: str):
    def mutate(doc: Dict[str, Any]) -> Dict[str, Any]:
        doc[field_name] = doc.get(field_name, 0) + 1
        return doc
    return mutate
