import threading
from collections.abc import Sequence
from datetime import datetime

from docflow.config.settings import Settings
from docflow.database.exceptions import DocumentNotFoundError, RepositoryUnavailableError
from docflow.database.repositories.base import BaseDocumentRepository
from docflow.extraction.base import BaseTextExtractor
from docflow.extraction.exceptions import ExtractorError
from docflow.extraction.extractor import TextExtractor
from docflow.logging.logger import Log
from docflow.pdf.factory import PdfEngineFactory
from docflow.processor.exceptions import (
    InvalidTransitionError,
    OwnershipLostError,
    ProcessingCancelledError,
)
from docflow.processor.failures import failure_message
from docflow.processor.locks import DocumentLockRegistry
from docflow.processor.models import Document
from docflow.processor.pipeline import PipelineContext, PipelineStep
from docflow.processor.state_machine import Trigger, can_transition
from docflow.processor.steps import (
    ExtractTextStep,
    LoadBytesStep,
    PersistExtractedStep,
    PersistSummaryStep,
    SummarizeStep,
    commit_transition,
)
from docflow.storage.base import BaseStorageBackend
from docflow.storage.exceptions import StorageError
from docflow.summarization.base import BaseSummarizer
from docflow.summarization.exceptions import SummarizerError
from docflow.summarization.factory import SummarizerFactory
from docflow.summarization.models import SummaryOptions

HANDLED_ERRORS = (StorageError, ExtractorError, SummarizerError, ProcessingCancelledError)


class Processor:
    """Drives one document through the lifecycle, one attempt per call.

    Pipeline: claim -> load -> extract -> persist text -> summarize ->
    persist summary. Storage, extraction and summarization errors become a
    ``failed`` status; repository outages abort the attempt and propagate.
    """

    def __init__(
        self,
        *,
        doc_repo: BaseDocumentRepository,
        steps: Sequence[PipelineStep],
        locks: DocumentLockRegistry | None = None,
        summary_options: SummaryOptions | None = None,
    ) -> None:
        self._doc_repo = doc_repo
        self._steps = list(steps)
        self._locks = locks if locks is not None else DocumentLockRegistry()
        self._summary_options = summary_options

    def process(
        self,
        document_id: str,
        cancel_event: threading.Event | None = None,
        options: SummaryOptions | None = None,
    ) -> Document:
        """Process a pending document. Documents in any other status are
        returned unchanged."""
        return self._attempt(document_id, Trigger.START, cancel_event, options)

    def retry(
        self,
        document_id: str,
        cancel_event: threading.Event | None = None,
        options: SummaryOptions | None = None,
    ) -> Document:
        """Re-run a failed or processed document from scratch.

        Raises:
            InvalidTransitionError: if the document is pending or processing.
        """
        return self._attempt(document_id, Trigger.RETRY, cancel_event, options)

    def fail_stale(self, older_than: datetime) -> list[Document]:
        """Mark documents stuck in processing since before ``older_than`` as failed.

        Documents owned by an attempt in this process are left alone.
        """
        reaped: list[Document] = []
        for document in self._doc_repo.list_stale(older_than):
            with self._locks.hold(document.id) as acquired:
                if not acquired:
                    continue
                message = (
                    "Processing interrupted: no progress since "
                    f"{document.updated_at.isoformat()}"
                )
                try:
                    reaped.append(
                        commit_transition(
                            self._doc_repo, document, Trigger.FAIL, error_message=message
                        )
                    )
                except OwnershipLostError:
                    Log.info("Stale document changed before reaping", document_id=document.id)
        return reaped

    def _attempt(
        self,
        document_id: str,
        trigger: Trigger,
        cancel_event: threading.Event | None,
        options: SummaryOptions | None,
    ) -> Document:
        with self._locks.hold(document_id) as acquired:
            if not acquired:
                Log.info("Document already in flight, skipping", document_id=document_id)
                return self._doc_repo.load(document_id)

            document = self._doc_repo.load(document_id)
            if not can_transition(document.status, trigger):
                if trigger is Trigger.RETRY:
                    raise InvalidTransitionError(
                        f"Document {document_id} cannot be retried while "
                        f"'{document.status.value}'"
                    )
                Log.info(
                    f"Document is '{document.status.value}', nothing to process",
                    document_id=document_id,
                )
                return document

            try:
                document = commit_transition(self._doc_repo, document, trigger)
            except OwnershipLostError:
                Log.info("Document claimed by another worker", document_id=document_id)
                return self._current(document)

            context = PipelineContext(
                document=document,
                options=options or self._summary_options,
                cancel_event=cancel_event,
            )
            return self._run_steps(context)

    def _run_steps(self, context: PipelineContext) -> Document:
        try:
            for step in self._steps:
                if context.cancelled:
                    raise ProcessingCancelledError("cancelled by caller")
                context = step.run(context)
        except RepositoryUnavailableError:
            Log.error(
                "Repository unavailable, attempt aborted without status update",
                document_id=context.document.id,
            )
            raise
        except OwnershipLostError as exc:
            Log.warning(f"Attempt abandoned: {exc}", document_id=context.document.id)
            return self._current(context.document)
        except HANDLED_ERRORS as exc:
            return self._fail(context.document, failure_message(exc))
        except KeyboardInterrupt:
            self._fail(context.document, "Processing cancelled: interrupted")
            raise
        except Exception as exc:
            Log.exception("Unexpected processing error", document_id=context.document.id)
            self._fail(context.document, failure_message(exc))
            raise
        return context.document

    def _fail(self, document: Document, message: str) -> Document:
        Log.error(f"Processing failed: {message}", document_id=document.id)
        try:
            return commit_transition(
                self._doc_repo, document, Trigger.FAIL, error_message=message
            )
        except OwnershipLostError:
            Log.warning("Could not record failure, document changed", document_id=document.id)
            return self._current(document)

    def _current(self, document: Document) -> Document:
        """Stored state of a document another actor changed, or ``document``
        itself if it was deleted in the meantime."""
        try:
            return self._doc_repo.load(document.id)
        except DocumentNotFoundError:
            Log.warning("Document deleted during processing", document_id=document.id)
            return document


def build_processor(
    settings: Settings,
    *,
    storage: BaseStorageBackend,
    doc_repo: BaseDocumentRepository,
    extractor: BaseTextExtractor | None = None,
    summarizer: BaseSummarizer | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    if extractor is None:
        extractor = TextExtractor(pdf_engine=PdfEngineFactory.create(settings))
    if summarizer is None:
        summarizer = SummarizerFactory.create(settings)
    steps: list[PipelineStep] = [
        LoadBytesStep(storage=storage),
        ExtractTextStep(extractor=extractor),
        PersistExtractedStep(doc_repo=doc_repo),
        SummarizeStep(summarizer=summarizer),
        PersistSummaryStep(doc_repo=doc_repo),
    ]
    return Processor(doc_repo=doc_repo, steps=steps)
