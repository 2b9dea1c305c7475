from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from docflow.summarization.models import SummaryResult


class DocumentStatus(str, Enum):
    """Lifecycle state of a document."""

    PENDING = "pending"
    PROCESSING = "processing"
    PROCESSED = "processed"
    FAILED = "failed"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Document:
    """One uploaded file and its processing outcome.

    Instances are immutable; transitions build a new instance through
    ``apply_transition`` so a failed write never corrupts the caller's copy.
    """

    id: str
    file_name: str
    content_type: str
    size_bytes: int
    storage_locator: str
    status: DocumentStatus = DocumentStatus.PENDING
    extracted_text: str | None = None
    summary: str | None = None
    summary_metadata: dict[str, object] | None = None
    error_message: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    is_deleted: bool = False


@dataclass(frozen=True)
class StatusView:
    """Read model returned to callers asking about a document."""

    document_id: str
    status: DocumentStatus
    summary: str | None = None
    error_message: str | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_document(cls, document: Document) -> "StatusView":
        return cls(
            document_id=document.id,
            status=document.status,
            summary=document.summary,
            error_message=document.error_message,
            updated_at=document.updated_at,
        )


def summary_metadata(result: SummaryResult) -> dict[str, object]:
    """Audit fields persisted next to the summary text."""
    return {
        "model_id": result.model_id,
        "truncated": result.truncated,
        "input_chars": result.input_chars,
        "submitted_chars": result.submitted_chars,
    }
