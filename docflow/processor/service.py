import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

from docflow.config.settings import Settings
from docflow.database.exceptions import RepositoryUnavailableError
from docflow.database.repositories.base import BaseDocumentRepository
from docflow.database.repositories.document_repository import DocumentRepository
from docflow.logging.logger import Log
from docflow.processor.models import Document, DocumentStatus, StatusView, utc_now
from docflow.processor.processor import Processor, build_processor
from docflow.storage.base import BaseStorageBackend
from docflow.storage.factory import StorageBackendFactory
from docflow.storage.models import StorageMetadata
from docflow.summarization.base import BaseSummarizer
from docflow.summarization.models import SummaryOptions

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class DocumentService:
    """Entry points used by the upload path, the UI and the CLI."""

    def __init__(
        self,
        *,
        storage: BaseStorageBackend,
        doc_repo: BaseDocumentRepository,
        processor: Processor,
        settings: Settings,
    ) -> None:
        self._storage = storage
        self._doc_repo = doc_repo
        self._processor = processor
        self._settings = settings

    def submit(self, data: bytes, file_name: str, content_type: str) -> str:
        """Store the upload, create a pending record and return its id.

        The bytes are stored before the record exists, so a pending document
        always has a valid locator. Processing runs right away when
        ``process_on_submit`` is enabled; an error there is logged and the id
        is still returned.
        """
        document_id = str(uuid.uuid4())
        content_type = content_type.strip() or DEFAULT_CONTENT_TYPE
        locator = self._storage.put(
            data,
            StorageMetadata(
                document_id=document_id,
                file_name=file_name,
                content_type=content_type,
            ),
        )
        self._doc_repo.create(
            Document(
                id=document_id,
                file_name=file_name,
                content_type=content_type,
                size_bytes=len(data),
                storage_locator=locator,
            )
        )
        Log.info(
            f"Submitted '{file_name}' ({len(data)} bytes, {content_type})",
            document_id=document_id,
        )
        if self._settings.process_on_submit:
            try:
                self._processor.process(document_id)
            except Exception:
                # the record holds whatever status the attempt reached
                Log.exception("Processing after submit failed", document_id=document_id)
        return document_id

    def process_document(
        self,
        document_id: str,
        cancel_event: threading.Event | None = None,
        options: SummaryOptions | None = None,
    ) -> Document:
        return self._processor.process(document_id, cancel_event, options)

    def retry(
        self,
        document_id: str,
        cancel_event: threading.Event | None = None,
        options: SummaryOptions | None = None,
    ) -> Document:
        Log.info("Retry requested", document_id=document_id)
        return self._processor.retry(document_id, cancel_event, options)

    def get_status(self, document_id: str) -> StatusView:
        return StatusView.from_document(self._doc_repo.load(document_id))

    def list_active(self) -> list[Document]:
        return self._doc_repo.list_active()

    def delete(self, document_id: str) -> None:
        """Soft-delete; stored bytes and the record are kept."""
        self._doc_repo.soft_delete(document_id)
        Log.info("Document soft-deleted", document_id=document_id)

    def process_pending(self) -> list[Document]:
        """Process every pending document, several at a time.

        Each document runs in its own task; the per-document claim keeps two
        tasks from working on the same id. A document whose attempt raises is
        logged and left out of the result without stopping the others.

        Raises:
            RepositoryUnavailableError: after the batch settles, if any
                attempt lost the database.
        """
        pending = [
            d.id for d in self._doc_repo.list_active() if d.status is DocumentStatus.PENDING
        ]
        if not pending:
            return []
        Log.info(f"Processing {len(pending)} pending documents")
        with ThreadPoolExecutor(
            max_workers=max(1, self._settings.processing_max_workers),
            thread_name_prefix="docflow",
        ) as executor:
            futures = [
                (doc_id, executor.submit(self._processor.process, doc_id))
                for doc_id in pending
            ]
            results: list[Document] = []
            outage: RepositoryUnavailableError | None = None
            for doc_id, future in futures:
                try:
                    results.append(future.result())
                except RepositoryUnavailableError as exc:
                    Log.error(f"Batch attempt lost the database: {exc}", document_id=doc_id)
                    outage = outage or exc
                except Exception:
                    Log.exception("Batch attempt failed", document_id=doc_id)
        if outage is not None:
            raise outage
        return results

    def reap_stale(self, older_than_seconds: int | None = None) -> list[Document]:
        """Fail documents left in processing by a crashed or aborted attempt."""
        seconds = (
            older_than_seconds
            if older_than_seconds is not None
            else self._settings.stale_processing_seconds
        )
        cutoff = utc_now() - timedelta(seconds=seconds)
        reaped = self._processor.fail_stale(cutoff)
        if reaped:
            Log.warning(f"Marked {len(reaped)} stale documents as failed")
        return reaped


def build_service(
    settings: Settings,
    *,
    doc_repo: BaseDocumentRepository | None = None,
    storage: BaseStorageBackend | None = None,
    summarizer: BaseSummarizer | None = None,
) -> DocumentService:
    """Wire the service from settings. The PostgreSQL repository needs
    ``init_pool`` to have been called."""
    if doc_repo is None:
        doc_repo = DocumentRepository()
    if storage is None:
        storage = StorageBackendFactory.create(settings)
    processor = build_processor(
        settings, storage=storage, doc_repo=doc_repo, summarizer=summarizer
    )
    return DocumentService(
        storage=storage,
        doc_repo=doc_repo,
        processor=processor,
        settings=settings,
    )
