"""
Document Store - per-collection JSON document persistence.

``DocumentStore`` is the interface every service receives through the
container; there is no module-level store. Two implementations:

- ``MemoryDocumentStore``: process-local dicts guarded by an ``asyncio.Lock``
- ``SQLiteDocumentStore``: JSON bodies in SQLite through ``Database``

Documents are plain dicts. The store owns ``id``, ``createdAt`` and
``updatedAt``; callers own everything else.
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..faults import StoreFault
from .engine import Database

logger = logging.getLogger("archmarket.db")

Document = Dict[str, Any]
Mutation = Callable[[Document], Document]

_MISSING = object()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def get_path(document: Any, path: str, default: Any = None) -> Any:
    """Resolve a dotted path (``"rating.average"``) inside nested dicts."""
    value = document
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return default
        value = value[part]
    return value


@dataclass
class Query:
    """
    Selection over one collection.

    Attributes:
        where: equality filters on dotted paths, all must hold
        predicate: extra filter applied after ``where``
        order_by: dotted path to sort on
        descending: sort direction
        offset / limit: slice applied after sorting
    """
    where: Dict[str, Any] = field(default_factory=dict)
    predicate: Optional[Callable[[Document], bool]] = None
    order_by: str = "createdAt"
    descending: bool = True
    offset: int = 0
    limit: Optional[int] = None

    def matches(self, document: Document) -> bool:
        for path, expected in self.where.items():
            if get_path(document, path, _MISSING) != expected:
                return False
        return self.predicate is None or bool(self.predicate(document))

    def select(self, documents: Iterable[Document]) -> List[Document]:
        """Filter, sort and slice; ties keep insertion order, newest first when descending."""
        matched = [doc for doc in documents if self.matches(doc)]
        if self.descending:
            matched.reverse()
        present = [d for d in matched if get_path(d, self.order_by) is not None]
        absent = [d for d in matched if get_path(d, self.order_by) is None]
        present.sort(key=lambda d: get_path(d, self.order_by), reverse=self.descending)
        ordered = present + absent if self.descending else absent + present
        end = None if self.limit is None else self.offset + self.limit
        return ordered[self.offset:end]


class DocumentStore(ABC):
    """Interface over create/find/update operations on document collections."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.clock = clock or utcnow

    def _timestamp(self) -> str:
        return self.clock().isoformat()

    async def connect(self) -> None:
        """Prepare the backing storage; no-op by default."""

    async def close(self) -> None:
        """Release the backing storage; no-op by default."""

    @abstractmethod
    async def insert(self, collection: str, document: Document) -> Document:
        """Persist a new document; assigns ``id``, ``createdAt`` and ``updatedAt``."""

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        ...

    @abstractmethod
    async def find(self, collection: str, query: Optional[Query] = None) -> List[Document]:
        ...

    @abstractmethod
    async def count(self, collection: str, query: Optional[Query] = None) -> int:
        """Number of matches, ignoring offset and limit."""

    @abstractmethod
    async def update(self, collection: str, doc_id: str, mutate: Mutation) -> Optional[Document]:
        """
        Atomically load, mutate and persist one document.

        ``mutate`` receives a private copy and returns the new document.
        Anything it raises propagates and nothing is written. Returns
        ``None`` when the document does not exist.
        """

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> bool:
        ...

    @abstractmethod
    async def next_sequence(self, name: str) -> int:
        """Atomically increment a named counter; the first value is 1."""

    async def find_one(self, collection: str, query: Query) -> Optional[Document]:
        query.limit = 1
        found = await self.find(collection, query)
        return found[0] if found else None

    async def distinct(self, collection: str, field_path: str, query: Optional[Query] = None) -> List[Any]:
        values = {
            get_path(doc, field_path)
            for doc in await self.find(collection, query)
        }
        values.discard(None)
        return sorted(values)

    def _stamp_new(self, document: Document) -> Document:
        doc = copy.deepcopy(document)
        now = self._timestamp()
        doc.setdefault("id", uuid.uuid4().hex)
        doc["createdAt"] = doc.get("createdAt") or now
        doc["updatedAt"] = now
        return doc

    def _stamp_updated(self, original: Document, updated: Document) -> Document:
        if not isinstance(updated, dict):
            raise StoreFault("update", "Mutation must return a document")
        updated["id"] = original["id"]
        updated["createdAt"] = original["createdAt"]
        updated["updatedAt"] = self._timestamp()
        return updated


# ============================================================================
# In-memory store
# ============================================================================

class MemoryDocumentStore(DocumentStore):
    """Process-local store; every public operation holds one lock."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        super().__init__(clock)
        self._collections: Dict[str, Dict[str, Document]] = {}
        self._counters: Dict[str, int] = {}
        self._lock = asyncio.Lock()

    def _collection(self, name: str) -> Dict[str, Document]:
        return self._collections.setdefault(name, {})

    async def insert(self, collection: str, document: Document) -> Document:
        async with self._lock:
            doc = self._stamp_new(document)
            docs = self._collection(collection)
            if doc["id"] in docs:
                raise StoreFault("insert", f"Duplicate id {doc['id']!r}", collection=collection)
            docs[doc["id"]] = doc
            return copy.deepcopy(doc)

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        async with self._lock:
            doc = self._collection(collection).get(doc_id)
            return copy.deepcopy(doc) if doc is not None else None

    async def find(self, collection: str, query: Optional[Query] = None) -> List[Document]:
        query = query or Query()
        async with self._lock:
            return copy.deepcopy(query.select(self._collection(collection).values()))

    async def count(self, collection: str, query: Optional[Query] = None) -> int:
        query = query or Query()
        async with self._lock:
            return sum(1 for doc in self._collection(collection).values() if query.matches(doc))

    async def update(self, collection: str, doc_id: str, mutate: Mutation) -> Optional[Document]:
        async with self._lock:
            docs = self._collection(collection)
            original = docs.get(doc_id)
            if original is None:
                return None
            updated = self._stamp_updated(original, mutate(copy.deepcopy(original)))
            docs[doc_id] = updated
            return copy.deepcopy(updated)

    async def delete(self, collection: str, doc_id: str) -> bool:
        async with self._lock:
            return self._collection(collection).pop(doc_id, None) is not None

    async def next_sequence(self, name: str) -> int:
        async with self._lock:
            value = self._counters.get(name, 0) + 1
            self._counters[name] = value
            return value


# ============================================================================
# SQLite store
# ============================================================================

SCHEMA = """
CREATE TABLE IF NOT EXISTS documents (
    collection TEXT NOT NULL,
    id TEXT NOT NULL,
    body TEXT NOT NULL,
    created_at TEXT NOT NULL,
    PRIMARY KEY (collection, id)
);
CREATE INDEX IF NOT EXISTS idx_documents_collection_created
    ON documents (collection, created_at);
CREATE TABLE IF NOT EXISTS counters (
    name TEXT PRIMARY KEY,
    value INTEGER NOT NULL
);
"""


class SQLiteDocumentStore(DocumentStore):
    """
    Documents as JSON text in SQLite.

    ``where`` filters are pushed down as ``json_extract`` comparisons;
    predicates and ordering run in Python over the matching rows.
    """

    def __init__(self, database: Database, clock: Optional[Callable[[], datetime]] = None):
        super().__init__(clock)
        self.database = database

    async def connect(self) -> None:
        await self.database.connect()
        await self.create_schema()

    async def close(self) -> None:
        await self.database.disconnect()

    async def create_schema(self) -> None:
        await self.database.execute_script(SCHEMA)
        logger.info("Document store schema ready")

    @staticmethod
    def _dump(document: Document) -> str:
        return json.dumps(document, separators=(",", ":"), default=str)

    @staticmethod
    def _where_clause(collection: str, query: Query) -> tuple:
        clauses = ["collection = ?"]
        params: List[Any] = [collection]
        for path, expected in query.where.items():
            expr = "json_extract(body, ?)"
            params.append("$." + path)
            if expected is None:
                clauses.append(f"{expr} IS NULL")
            elif isinstance(expected, (dict, list)):
                clauses.append(f"json({expr}) = json(?)")
                params.append(json.dumps(expected))
            else:
                clauses.append(f"{expr} = ?")
                params.append(expected)
        return " AND ".join(clauses), params

    async def _matching(self, collection: str, query: Query) -> List[Document]:
        where, params = self._where_clause(collection, query)
        rows = await self.database.fetch_all(
            f"SELECT body FROM documents WHERE {where} ORDER BY rowid", params
        )
        return [json.loads(row["body"]) for row in rows]

    async def insert(self, collection: str, document: Document) -> Document:
        doc = self._stamp_new(document)
        await self.database.execute(
            "INSERT INTO documents (collection, id, body, created_at) VALUES (?, ?, ?, ?)",
            [collection, doc["id"], self._dump(doc), doc["createdAt"]],
        )
        return doc

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        body = await self.database.fetch_val(
            "SELECT body FROM documents WHERE collection = ? AND id = ?", [collection, doc_id]
        )
        return json.loads(body) if body is not None else None

    async def find(self, collection: str, query: Optional[Query] = None) -> List[Document]:
        query = query or Query()
        return query.select(await self._matching(collection, query))

    async def count(self, collection: str, query: Optional[Query] = None) -> int:
        query = query or Query()
        if query.predicate is None:
            where, params = self._where_clause(collection, query)
            return await self.database.fetch_val(f"SELECT COUNT(*) FROM documents WHERE {where}", params)
        return sum(1 for doc in await self._matching(collection, query) if query.matches(doc))

    async def update(self, collection: str, doc_id: str, mutate: Mutation) -> Optional[Document]:
        async with self.database.transaction(immediate=True):
            body = await self.database.fetch_val(
                "SELECT body FROM documents WHERE collection = ? AND id = ?", [collection, doc_id]
            )
            if body is None:
                return None
            original = json.loads(body)
            updated = self._stamp_updated(original, mutate(json.loads(body)))
            await self.database.execute(
                "UPDATE documents SET body = ? WHERE collection = ? AND id = ?",
                [self._dump(updated), collection, doc_id],
            )
            return updated

    async def delete(self, collection: str, doc_id: str) -> bool:
        cursor = await self.database.execute(
            "DELETE FROM documents WHERE collection = ? AND id = ?", [collection, doc_id]
        )
        return cursor.rowcount > 0

    async def next_sequence(self, name: str) -> int:
        async with self.database.transaction(immediate=True):
            rows = await self.database.fetch_all(
                "INSERT INTO counters (name, value) VALUES (?, 1) "
                "ON CONFLICT(name) DO UPDATE SET value = value + 1 "
                "RETURNING value",
                [name],
            )
            return rows[0]["value"]


def create_store(url: str, clock: Optional[Callable[[], datetime]] = None) -> DocumentStore:
    """Build a store from a ``database.url`` setting."""
    if url.startswith("memory:"):
        return MemoryDocumentStore(clock)
    return SQLiteDocumentStore(Database(url), clock)
