"""Document instances, lifecycle events, and the reference repository.

Usage:
    from doc_denorm.documents import Document, DocumentRepository
    from doc_denorm.documents import HookRegistry, LifecycleEvent
"""

from doc_denorm.documents.document import Document
from doc_denorm.documents.lifecycle import HookRegistry, LifecycleEvent
from doc_denorm.documents.repository import DocumentRepository, fetch_reference

__all__ = [
    "Document",
    "DocumentRepository",
    "HookRegistry",
    "LifecycleEvent",
    "fetch_reference",
]
