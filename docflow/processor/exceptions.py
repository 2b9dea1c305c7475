class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class InvalidTransitionError(ProcessorError):
    """Raised when a status change is not allowed by the transition table."""


class ProcessingCancelledError(ProcessorError):
    """Raised between pipeline steps when the caller cancelled the attempt."""


class OwnershipLostError(ProcessorError):
    """Raised when another actor changed the document while it was in flight."""
