from abc import ABC, abstractmethod

from docflow.storage.models import StorageMetadata


class BaseStorageBackend(ABC):
    """Contract for all byte-blob storage adapters."""

    name: str = ""

    @abstractmethod
    def put(self, data: bytes, metadata: StorageMetadata) -> str:
        """Store bytes and return an opaque locator.

        The locator is derived from ``metadata.document_id``; repeating a put
        for the same document rewrites only that document's bytes.

        Raises:
            StorageBackendUnavailableError: if the medium cannot be written.
        """

    @abstractmethod
    def get(self, locator: str) -> bytes:
        """Read bytes previously stored under ``locator``.

        Raises:
            StorageNotFoundError: if nothing is stored under the locator.
            StorageBackendUnavailableError: if the medium cannot be reached.
        """

    @abstractmethod
    def exists(self, locator: str) -> bool:
        """Return True if bytes are stored under ``locator``.

        Raises:
            StorageBackendUnavailableError: if the medium cannot be reached.
        """
