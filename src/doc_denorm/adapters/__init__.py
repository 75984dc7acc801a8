"""Document store adapters package.

Provides the ``DocumentStore`` Protocol, the in-process
``InMemoryDocumentStore`` and the PostgreSQL-backed
``PostgresDocumentStore``.

Usage:
    from doc_denorm.adapters import DocumentStore, InMemoryDocumentStore
    from doc_denorm.adapters import PostgresDocumentStore
"""

from doc_denorm.adapters.base import DocumentStore
from doc_denorm.adapters.memory import InMemoryDocumentStore
from doc_denorm.adapters.postgres import PostgresDocumentStore

__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
    "PostgresDocumentStore",
]
