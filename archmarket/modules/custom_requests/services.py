"""
Custom requests module services.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from archmarket.db import DocumentStore, Query, utcnow

from .faults import CustomRequestNotFoundFault
from .models import CUSTOM_REQUESTS, Priority, RequestStatus

logger = logging.getLogger("archmarket.custom_requests")


class CustomRequestService:
    def __init__(self, store: DocumentStore, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.clock = clock or utcnow

    async def submit(self, client_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        document = {
            "priority": Priority.MEDIUM.value,
            "tags": [],
            **data,
            "client": client_id,
            "status": RequestStatus.SUBMITTED.value,
            "communications": [],
        }
        document["budget"] = {"currency": "USD", **document["budget"]}
        created = await self.store.insert(CUSTOM_REQUESTS, document)
        logger.info(f"Custom request {created['id']} submitted by {client_id}")
        return created

    async def list_requests(
        self,
        *,
        client_id: Optional[str] = None,
        status: Optional[str] = None,
        category: Optional[str] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """All requests, or only *client_id*'s when given."""
        where: Dict[str, Any] = {}
        if client_id is not None:
            where["client"] = client_id
        if status:
            where["status"] = status
        if category:
            where["category"] = category
        found = await self.store.find(CUSTOM_REQUESTS, Query(where=where, offset=offset, limit=limit))
        total = await self.store.count(CUSTOM_REQUESTS, Query(where=where))
        return found, total

    async def get_request(self, request_id: str) -> Dict[str, Any]:
        found = await self.store.get(CUSTOM_REQUESTS, request_id)
        if found is None:
            raise CustomRequestNotFoundFault(request_id)
        return found

    async def _mutate(self, request_id: str, mutate) -> Dict[str, Any]:
        updated = await self.store.update(CUSTOM_REQUESTS, request_id, mutate)
        if updated is None:
            raise CustomRequestNotFoundFault(request_id)
        return updated

    async def update_request(self, request_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        def mutate(doc):
            if "budget" in changes:
                changes["budget"] = {**doc.get("budget", {}), **changes["budget"]}
            doc.update(changes)
            return doc

        return await self._mutate(request_id, mutate)

    async def delete_request(self, request_id: str) -> None:
        if not await self.store.delete(CUSTOM_REQUESTS, request_id):
            raise CustomRequestNotFoundFault(request_id)

    async def set_status(self, request_id: str, status: str) -> Dict[str, Any]:
        def mutate(doc):
            doc["status"] = status
            return doc

        updated = await self._mutate(request_id, mutate)
        logger.info(f"Custom request {request_id} moved to {status}")
        return updated

    async def add_communication(
        self,
        request_id: str,
        sender_id: str,
        message: str,
        *,
        is_internal: bool = False,
    ) -> Dict[str, Any]:
        entry = {
            "sender": sender_id,
            "message": message,
            "sentAt": self.clock().isoformat(),
            "isInternal": is_internal,
        }

        def mutate(doc):
            doc.setdefault("communications", []).append(entry)
            return doc

        return await self._mutate(request_id, mutate)
