from docflow.extraction.exceptions import (
    CorruptInputError,
    EmptyResultError,
    UnsupportedFormatError,
)
from docflow.processor.exceptions import ProcessingCancelledError
from docflow.storage.exceptions import StorageBackendUnavailableError, StorageNotFoundError
from docflow.summarization.exceptions import (
    AuthError,
    InvalidResponseError,
    RateLimitedError,
    RemoteUnavailableError,
)

# The prefix tells an operator which kind of action a failure needs.
FAILURE_CATEGORIES: tuple[tuple[type[BaseException], str], ...] = (
    (UnsupportedFormatError, "Unsupported format"),
    (CorruptInputError, "Corrupt or unreadable input"),
    (EmptyResultError, "No extractable text"),
    (StorageNotFoundError, "Stored file missing"),
    (StorageBackendUnavailableError, "Storage unavailable"),
    (RemoteUnavailableError, "Summarization service unavailable"),
    (RateLimitedError, "Summarization rate limited"),
    (InvalidResponseError, "Invalid summarization response"),
    (AuthError, "Summarization authentication failed (check configuration)"),
    (ProcessingCancelledError, "Processing cancelled"),
)


def failure_message(exc: BaseException) -> str:
    """Human-readable ``error_message`` for a failed attempt.

    Errors flagged ``retryable`` are marked ``(transient)`` so an operator
    knows a retry may succeed without changing the input.
    """
    label = "Unexpected error"
    for exc_type, category in FAILURE_CATEGORIES:
        if isinstance(exc, exc_type):
            label = category
            break
    if getattr(exc, "retryable", False):
        label = f"{label} (transient)"
    detail = str(exc).strip() or type(exc).__name__
    return f"{label}: {detail}"
