from docflow.database.repositories.base import BaseDocumentRepository
from docflow.extraction.base import BaseTextExtractor
from docflow.logging.logger import Log
from docflow.processor.exceptions import OwnershipLostError
from docflow.processor.models import Document, summary_metadata
from docflow.processor.pipeline import PipelineContext, PipelineStep
from docflow.processor.state_machine import Trigger, apply_transition
from docflow.storage.base import BaseStorageBackend
from docflow.summarization.base import BaseSummarizer


def commit_transition(
    doc_repo: BaseDocumentRepository,
    document: Document,
    trigger: Trigger,
    **payload: object,
) -> Document:
    """Apply ``trigger`` and persist it only if the stored status is unchanged.

    Raises:
        InvalidTransitionError: if the transition is not allowed.
        OwnershipLostError: if another actor changed the stored status.
    """
    moved = apply_transition(document, trigger, **payload)  # type: ignore[arg-type]
    if not doc_repo.save(moved, expected_status=document.status):
        raise OwnershipLostError(
            f"Document {document.id} is no longer '{document.status.value}'"
        )
    Log.info(
        f"Document {document.id}: {document.status.value} -> {moved.status.value}",
        trigger=trigger.value,
    )
    return moved


class LoadBytesStep(PipelineStep):
    def __init__(self, storage: BaseStorageBackend) -> None:
        self._storage = storage

    def run(self, context: PipelineContext) -> PipelineContext:
        context.raw_bytes = self._storage.get(context.document.storage_locator)
        Log.info(f"Loaded {len(context.raw_bytes)} bytes", document_id=context.document.id)
        return context


class ExtractTextStep(PipelineStep):
    def __init__(self, extractor: BaseTextExtractor) -> None:
        self._extractor = extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        context.extracted_text = self._extractor.extract(
            context.raw_bytes, context.document.content_type
        )
        # raw bytes are not needed past this point
        context.raw_bytes = b""
        Log.info(
            f"Extracted {len(context.extracted_text)} chars",
            document_id=context.document.id,
        )
        return context


class PersistExtractedStep(PipelineStep):
    def __init__(self, doc_repo: BaseDocumentRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        context.document = commit_transition(
            self._doc_repo,
            context.document,
            Trigger.EXTRACTED,
            extracted_text=context.extracted_text,
        )
        return context


class SummarizeStep(PipelineStep):
    def __init__(self, summarizer: BaseSummarizer) -> None:
        self._summarizer = summarizer

    def run(self, context: PipelineContext) -> PipelineContext:
        if not context.extracted_text:
            raise ValueError("PipelineContext.extracted_text must be set before summarization")
        context.summary_result = self._summarizer.summarize(
            context.extracted_text, context.options
        )
        Log.info(
            f"Summarized into {len(context.summary_result.text)} chars",
            document_id=context.document.id,
            truncated=context.summary_result.truncated,
        )
        return context


class PersistSummaryStep(PipelineStep):
    def __init__(self, doc_repo: BaseDocumentRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.summary_result is None:
            raise ValueError("PipelineContext.summary_result must be set before persist")
        context.document = commit_transition(
            self._doc_repo,
            context.document,
            Trigger.COMPLETE,
            summary=context.summary_result.text,
            summary_metadata=summary_metadata(context.summary_result),
        )
        return context
