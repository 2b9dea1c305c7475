from abc import ABC, abstractmethod
from datetime import datetime

from docflow.processor.models import Document, DocumentStatus


class BaseDocumentRepository(ABC):
    """Persistence contract for Document records.

    Every method may raise RepositoryUnavailableError when the backing store
    cannot be reached.
    """

    @abstractmethod
    def create(self, document: Document) -> Document:
        """Insert a new document record and return it."""

    @abstractmethod
    def load(self, document_id: str) -> Document:
        """Return the active document with this id.

        Raises:
            DocumentNotFoundError: if missing or soft-deleted.
        """

    @abstractmethod
    def save(
        self,
        document: Document,
        *,
        expected_status: DocumentStatus | None = None,
    ) -> bool:
        """Persist the mutable fields of ``document``.

        With ``expected_status`` the write only happens if the stored status
        still equals it (compare-and-set); returns False when it does not.

        Raises:
            DocumentNotFoundError: if the document is missing and no
                ``expected_status`` was given.
        """

    @abstractmethod
    def list_active(self) -> list[Document]:
        """Return all documents that are not soft-deleted, oldest first."""

    @abstractmethod
    def list_stale(self, older_than: datetime) -> list[Document]:
        """Return active documents stuck in processing since before ``older_than``."""

    @abstractmethod
    def soft_delete(self, document_id: str) -> None:
        """Mark the document deleted.

        Raises:
            DocumentNotFoundError: if missing or already deleted.
        """
