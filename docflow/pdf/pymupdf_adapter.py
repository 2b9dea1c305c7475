import pymupdf

from docflow.pdf.base import BasePdfEngine
from docflow.pdf.exceptions import PdfExtractionError


class PyMuPdfEngine(BasePdfEngine):
    """Reads page text with PyMuPDF."""

    name = "pymupdf"

    def extract_pages(self, pdf_bytes: bytes) -> list[str]:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                return [page.get_text() for page in doc]
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf could not parse the PDF: {exc}") from exc
