"""In-memory document store with TTL expiry.

WHY: The HTTP API structures a document once and serves its structure,
timeline and exports on later requests. Structuring is cheap but not
free, and ids must stay stable between requests, so structured documents
are cached in process. This is a cache, not persistence: a restart (or
the TTL) drops everything.

HOW: StoredDocument wraps a DocumentStructure with access timestamps.
DocumentStore is a dict keyed by document id behind a threading.Lock.
cleanup_expired() is called periodically by the app's lifespan task.

RULES:
- All store mutations are protected by threading.Lock
- get_document() returns None for unknown ids and refreshes last_accessed
- TTL is measured from last_accessed, so documents in use never expire
- add_document() raises ValueError once max_documents is reached
- Default TTL is 1 hour (3600 seconds)
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

from focus_reader.core.ir import DocumentStructure

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600
DEFAULT_MAX_DOCUMENTS = 100


@dataclass
class StoredDocument:
    document: DocumentStructure
    stored_at: float
    last_accessed: float


class DocumentStore:
    """Thread-safe in-memory cache of structured documents."""

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        max_documents: int = DEFAULT_MAX_DOCUMENTS,
    ) -> None:
        self._documents: Dict[str, StoredDocument] = {}
        self._lock = threading.Lock()
        self._ttl_seconds = ttl_seconds
        self.max_documents = max_documents

    def __len__(self) -> int:
        with self._lock:
            return len(self._documents)

    def add_document(self, document: DocumentStructure) -> StoredDocument:
        """Store a structured document under its id.

        Raises:
            ValueError: The store already holds max_documents documents.
        """
        with self._lock:
            if document.id not in self._documents and len(self._documents) >= self.max_documents:
                raise ValueError(
                    "Maximum number of stored documents ({}) reached".format(self.max_documents)
                )
            now = time.time()
            entry = StoredDocument(document=document, stored_at=now, last_accessed=now)
            self._documents[document.id] = entry

        logger.info("Stored document %s (%d words)", document.id, document.total_words)
        return entry

    def get_document(self, document_id: str) -> Optional[DocumentStructure]:
        with self._lock:
            entry = self._documents.get(document_id)
            if entry is None:
                return None
            entry.last_accessed = time.time()
            return entry.document

    def list_documents(self) -> List[DocumentStructure]:
        """All stored documents, oldest first."""
        with self._lock:
            entries = sorted(self._documents.values(), key=lambda e: e.stored_at)
            return [e.document for e in entries]

    def delete_document(self, document_id: str) -> bool:
        with self._lock:
            entry = self._documents.pop(document_id, None)

        if entry is None:
            return False
        logger.info("Deleted document %s", document_id)
        return True

    def cleanup_expired(self) -> int:
        """Remove documents not accessed within the TTL. Returns the count removed."""
        now = time.time()
        expired: List[StoredDocument] = []

        with self._lock:
            for document_id, entry in list(self._documents.items()):
                if now - entry.last_accessed > self._ttl_seconds:
                    expired.append(self._documents.pop(document_id))

        for entry in expired:
            logger.info(
                "Expired document %s (idle %.0fs)", entry.document.id, now - entry.last_accessed,
            )
        return len(expired)
