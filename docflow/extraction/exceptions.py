class ExtractorError(Exception):
    """Raised when text cannot be extracted from a document."""

    retryable = False


class UnsupportedFormatError(ExtractorError):
    """Raised when no extractor handles the document's content type."""


class CorruptInputError(ExtractorError):
    """Raised when the byte stream cannot be parsed or decoded."""


class EmptyResultError(ExtractorError):
    """Raised when the document parses but contains no text."""
