from abc import ABC, abstractmethod


class BaseTextExtractor(ABC):
    """Contract for turning raw document bytes into plain text."""

    @abstractmethod
    def extract(self, data: bytes, content_type: str) -> str:
        """Extract plain text from document bytes.

        Args:
            data: Raw document content, as returned by the storage backend.
            content_type: MIME type captured at upload. Parameters such as
                ``charset`` are honoured where they apply.

        Returns:
            Extracted text, sections joined in document order.

        Raises:
            UnsupportedFormatError: content type is not handled.
            CorruptInputError: bytes cannot be parsed.
            EmptyResultError: parsing succeeded but produced no text.
        """
