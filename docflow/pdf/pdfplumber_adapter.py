import io

import pdfplumber

from docflow.pdf.base import BasePdfEngine
from docflow.pdf.exceptions import PdfExtractionError


class PdfPlumberEngine(BasePdfEngine):
    """Reads page text with pdfplumber."""

    name = "pdfplumber"

    def extract_pages(self, pdf_bytes: bytes) -> list[str]:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                return [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber could not parse the PDF: {exc}") from exc
