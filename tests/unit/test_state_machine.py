from datetime import datetime, timezone

import pytest

from docflow.processor.exceptions import InvalidTransitionError
from docflow.processor.models import Document, DocumentStatus
from docflow.processor.state_machine import (
    TRANSITIONS,
    Trigger,
    apply_transition,
    can_transition,
    check_invariants,
)


def _make_document(status: DocumentStatus = DocumentStatus.PENDING, **fields: object) -> Document:
    return Document(
        id="doc-1",
        file_name="report.pdf",
        content_type="application/pdf",
        size_bytes=1024,
        storage_locator="doc-1/report.pdf",
        status=status,
        **fields,  # type: ignore[arg-type]
    )


class TestAllowedTransitions:
    def test_start_moves_pending_to_processing(self) -> None:
        moved = apply_transition(_make_document(), Trigger.START)
        assert moved.status is DocumentStatus.PROCESSING

    def test_extracted_keeps_processing_and_sets_text(self) -> None:
        doc = _make_document(DocumentStatus.PROCESSING)
        moved = apply_transition(doc, Trigger.EXTRACTED, extracted_text="hello")
        assert moved.status is DocumentStatus.PROCESSING
        assert moved.extracted_text == "hello"

    def test_complete_sets_summary_and_metadata(self) -> None:
        doc = _make_document(DocumentStatus.PROCESSING, extracted_text="hello")
        moved = apply_transition(
            doc,
            Trigger.COMPLETE,
            summary="short",
            summary_metadata={"truncated": False},
        )
        assert moved.status is DocumentStatus.PROCESSED
        assert moved.summary == "short"
        assert moved.summary_metadata == {"truncated": False}
        assert moved.error_message is None

    def test_fail_sets_error_and_keeps_extracted_text(self) -> None:
        doc = _make_document(DocumentStatus.PROCESSING, extracted_text="hello")
        moved = apply_transition(doc, Trigger.FAIL, error_message="boom")
        assert moved.status is DocumentStatus.FAILED
        assert moved.error_message == "boom"
        assert moved.extracted_text == "hello"
        assert moved.summary is None

    def test_retry_from_failed_clears_outputs(self) -> None:
        doc = _make_document(
            DocumentStatus.FAILED, extracted_text="old", error_message="boom"
        )
        moved = apply_transition(doc, Trigger.RETRY)
        assert moved.status is DocumentStatus.PROCESSING
        assert moved.error_message is None
        assert moved.extracted_text is None

    def test_retry_from_processed_clears_summary(self) -> None:
        doc = _make_document(
            DocumentStatus.PROCESSED,
            extracted_text="old",
            summary="old summary",
            summary_metadata={"truncated": False},
        )
        moved = apply_transition(doc, Trigger.RETRY)
        assert moved.status is DocumentStatus.PROCESSING
        assert moved.summary is None
        assert moved.summary_metadata is None

    def test_updated_at_refreshed(self) -> None:
        now = datetime(2030, 1, 1, tzinfo=timezone.utc)
        moved = apply_transition(_make_document(), Trigger.START, now=now)
        assert moved.updated_at == now

    def test_original_document_is_unchanged(self) -> None:
        doc = _make_document()
        apply_transition(doc, Trigger.START)
        assert doc.status is DocumentStatus.PENDING


class TestRejectedTransitions:
    @pytest.mark.parametrize("status", list(DocumentStatus))
    @pytest.mark.parametrize("trigger", list(Trigger))
    def test_only_table_entries_are_allowed(
        self, status: DocumentStatus, trigger: Trigger
    ) -> None:
        assert can_transition(status, trigger) == ((status, trigger) in TRANSITIONS)

    def test_processed_cannot_restart(self) -> None:
        doc = _make_document(DocumentStatus.PROCESSED, summary="s", summary_metadata={})
        with pytest.raises(InvalidTransitionError, match="Cannot apply 'start'"):
            apply_transition(doc, Trigger.START)

    def test_pending_cannot_complete_directly(self) -> None:
        with pytest.raises(InvalidTransitionError):
            apply_transition(_make_document(), Trigger.COMPLETE, summary="s")

    def test_pending_cannot_retry(self) -> None:
        with pytest.raises(InvalidTransitionError):
            apply_transition(_make_document(), Trigger.RETRY)

    def test_fail_requires_error_message(self) -> None:
        doc = _make_document(DocumentStatus.PROCESSING)
        with pytest.raises(InvalidTransitionError, match="error_message"):
            apply_transition(doc, Trigger.FAIL, error_message="")

    def test_complete_requires_summary(self) -> None:
        doc = _make_document(DocumentStatus.PROCESSING)
        with pytest.raises(InvalidTransitionError, match="summary"):
            apply_transition(doc, Trigger.COMPLETE)

    def test_extracted_requires_text(self) -> None:
        doc = _make_document(DocumentStatus.PROCESSING)
        with pytest.raises(InvalidTransitionError, match="extracted_text"):
            apply_transition(doc, Trigger.EXTRACTED)


class TestInvariants:
    def test_summary_without_processed_status_is_rejected(self) -> None:
        doc = _make_document(DocumentStatus.PROCESSING, summary="stray")
        with pytest.raises(InvalidTransitionError, match="summary"):
            check_invariants(doc)

    def test_error_without_failed_status_is_rejected(self) -> None:
        doc = _make_document(DocumentStatus.PENDING, error_message="stray")
        with pytest.raises(InvalidTransitionError, match="error_message"):
            check_invariants(doc)

    def test_full_lifecycle_keeps_invariants(self) -> None:
        doc = _make_document()
        for trigger, payload in (
            (Trigger.START, {}),
            (Trigger.EXTRACTED, {"extracted_text": "text"}),
            (Trigger.FAIL, {"error_message": "timeout"}),
            (Trigger.RETRY, {}),
            (Trigger.EXTRACTED, {"extracted_text": "text"}),
            (Trigger.COMPLETE, {"summary": "done", "summary_metadata": {}}),
        ):
            doc = apply_transition(doc, trigger, **payload)  # type: ignore[arg-type]
            check_invariants(doc)
        assert doc.status is DocumentStatus.PROCESSED
