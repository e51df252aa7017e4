"""
Persistence - SQLite engine and document stores.
"""

from .engine import Database, parse_sqlite_url
from .store import (
    Document,
    DocumentStore,
    MemoryDocumentStore,
    Query,
    SQLiteDocumentStore,
    create_store,
    get_path,
    utcnow,
)

__all__ = [
    "Database",
    "parse_sqlite_url",
    "Document",
    "DocumentStore",
    "MemoryDocumentStore",
    "SQLiteDocumentStore",
    "Query",
    "create_store",
    "get_path",
    "utcnow",
]
