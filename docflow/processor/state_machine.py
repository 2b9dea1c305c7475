"""Document lifecycle transitions.

Every status change goes through ``apply_transition``. The table below is the
complete set of allowed moves; anything else raises InvalidTransitionError.

    pending    --START-->     processing
    processing --EXTRACTED--> processing   (extracted_text set)
    processing --COMPLETE-->  processed    (summary set)
    processing --FAIL-->      failed       (error_message set)
    failed     --RETRY-->     processing   (outputs cleared)
    processed  --RETRY-->     processing   (outputs cleared)
"""

from dataclasses import replace
from datetime import datetime
from enum import Enum

from docflow.processor.exceptions import InvalidTransitionError
from docflow.processor.models import Document, DocumentStatus, utc_now


class Trigger(str, Enum):
    START = "start"
    EXTRACTED = "extracted"
    COMPLETE = "complete"
    FAIL = "fail"
    RETRY = "retry"


TRANSITIONS: dict[tuple[DocumentStatus, Trigger], DocumentStatus] = {
    (DocumentStatus.PENDING, Trigger.START): DocumentStatus.PROCESSING,
    (DocumentStatus.PROCESSING, Trigger.EXTRACTED): DocumentStatus.PROCESSING,
    (DocumentStatus.PROCESSING, Trigger.COMPLETE): DocumentStatus.PROCESSED,
    (DocumentStatus.PROCESSING, Trigger.FAIL): DocumentStatus.FAILED,
    (DocumentStatus.FAILED, Trigger.RETRY): DocumentStatus.PROCESSING,
    (DocumentStatus.PROCESSED, Trigger.RETRY): DocumentStatus.PROCESSING,
}


def can_transition(status: DocumentStatus, trigger: Trigger) -> bool:
    return (status, trigger) in TRANSITIONS


def apply_transition(
    document: Document,
    trigger: Trigger,
    *,
    now: datetime | None = None,
    extracted_text: str | None = None,
    summary: str | None = None,
    summary_metadata: dict[str, object] | None = None,
    error_message: str | None = None,
) -> Document:
    """Return a copy of ``document`` moved along ``trigger``.

    Raises:
        InvalidTransitionError: if the move is not in TRANSITIONS or the
            payload required by the trigger is missing.
    """
    target = TRANSITIONS.get((document.status, trigger))
    if target is None:
        raise InvalidTransitionError(
            f"Cannot apply '{trigger.value}' to document {document.id} "
            f"in status '{document.status.value}'"
        )

    changes: dict[str, object] = {
        "status": target,
        "updated_at": now or utc_now(),
    }
    if trigger is Trigger.EXTRACTED:
        if not extracted_text:
            raise InvalidTransitionError("EXTRACTED requires non-empty extracted_text")
        changes["extracted_text"] = extracted_text
    elif trigger is Trigger.COMPLETE:
        if not summary:
            raise InvalidTransitionError("COMPLETE requires a non-empty summary")
        changes["summary"] = summary
        changes["summary_metadata"] = summary_metadata or {}
        changes["error_message"] = None
    elif trigger is Trigger.FAIL:
        if not error_message:
            raise InvalidTransitionError("FAIL requires a non-empty error_message")
        changes["error_message"] = error_message
        changes["summary"] = None
        changes["summary_metadata"] = None
    elif trigger is Trigger.RETRY:
        changes["extracted_text"] = None
        changes["summary"] = None
        changes["summary_metadata"] = None
        changes["error_message"] = None

    moved = replace(document, **changes)
    check_invariants(moved)
    return moved


def check_invariants(document: Document) -> None:
    """Summary exists only when processed, error only when failed."""
    has_summary = document.summary is not None
    if has_summary != (document.status is DocumentStatus.PROCESSED):
        raise InvalidTransitionError(
            f"Document {document.id}: summary must be set iff status is processed"
        )
    has_error = document.error_message is not None
    if has_error != (document.status is DocumentStatus.FAILED):
        raise InvalidTransitionError(
            f"Document {document.id}: error_message must be set iff status is failed"
        )
