from abc import ABC, abstractmethod


class BasePdfEngine(ABC):
    """Contract for all PDF parsing engines."""

    name: str = ""

    @abstractmethod
    def extract_pages(self, pdf_bytes: bytes) -> list[str]:
        """Return the text of each page, in document order.

        Pages without a text layer yield an empty string.

        Raises:
            PdfExtractionError: if the byte stream cannot be parsed as a PDF.
        """
