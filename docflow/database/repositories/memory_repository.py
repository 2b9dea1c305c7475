"""In-process document repository.

Reference implementation of BaseDocumentRepository with the same
compare-and-set semantics as the PostgreSQL repository. Useful for local
development without a database and for tests.
"""

import threading
from dataclasses import replace
from datetime import datetime

from docflow.database.exceptions import DocumentNotFoundError
from docflow.database.repositories.base import BaseDocumentRepository
from docflow.processor.models import Document, DocumentStatus


class InMemoryDocumentRepository(BaseDocumentRepository):
    """Thread-safe dict-backed repository. Documents are immutable, so stored
    instances are shared without copying."""

    def __init__(self) -> None:
        self._documents: dict[str, Document] = {}
        self._lock = threading.Lock()

    def create(self, document: Document) -> Document:
        with self._lock:
            if document.id in self._documents:
                raise ValueError(f"Document {document.id} already exists")
            self._documents[document.id] = document
        return document

    def load(self, document_id: str) -> Document:
        with self._lock:
            document = self._documents.get(document_id)
        if document is None or document.is_deleted:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return document

    def save(
        self,
        document: Document,
        *,
        expected_status: DocumentStatus | None = None,
    ) -> bool:
        with self._lock:
            stored = self._documents.get(document.id)
            if stored is None or stored.is_deleted:
                if expected_status is None:
                    raise DocumentNotFoundError(f"Document {document.id} not found")
                return False
            if expected_status is not None and stored.status is not expected_status:
                return False
            self._documents[document.id] = replace(
                stored,
                status=document.status,
                extracted_text=document.extracted_text,
                summary=document.summary,
                summary_metadata=document.summary_metadata,
                error_message=document.error_message,
                updated_at=document.updated_at,
            )
        return True

    def list_active(self) -> list[Document]:
        with self._lock:
            documents = [d for d in self._documents.values() if not d.is_deleted]
        return sorted(documents, key=lambda d: d.created_at)

    def list_stale(self, older_than: datetime) -> list[Document]:
        return [
            d
            for d in self.list_active()
            if d.status is DocumentStatus.PROCESSING and d.updated_at < older_than
        ]

    def soft_delete(self, document_id: str) -> None:
        with self._lock:
            stored = self._documents.get(document_id)
            if stored is None or stored.is_deleted:
                raise DocumentNotFoundError(f"Document {document_id} not found")
            self._documents[document_id] = replace(stored, is_deleted=True)
