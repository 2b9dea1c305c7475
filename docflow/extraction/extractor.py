from collections.abc import Callable
from typing import ClassVar

from docflow.extraction.base import BaseTextExtractor
from docflow.extraction.exceptions import (
    CorruptInputError,
    EmptyResultError,
    UnsupportedFormatError,
)
from docflow.logging.logger import Log
from docflow.pdf.base import BasePdfEngine
from docflow.pdf.exceptions import PdfExtractionError


def parse_content_type(content_type: str) -> tuple[str, dict[str, str]]:
    """Split ``"text/plain; charset=latin-1"`` into media type and parameters."""
    media_type, _, raw_params = content_type.partition(";")
    params: dict[str, str] = {}
    for part in raw_params.split(";"):
        key, sep, value = part.partition("=")
        if sep:
            params[key.strip().lower()] = value.strip().strip('"')
    return media_type.strip().lower(), params


class TextExtractor(BaseTextExtractor):
    """Dispatches on content type: PDFs go to the PDF engine, text is decoded."""

    TEXT_TYPES: ClassVar[frozenset[str]] = frozenset({"text/plain", "text/markdown"})
    PDF_TYPES: ClassVar[frozenset[str]] = frozenset({"application/pdf", "application/x-pdf"})

    def __init__(self, pdf_engine: BasePdfEngine) -> None:
        self._pdf_engine = pdf_engine

    @property
    def supported_types(self) -> frozenset[str]:
        return self.PDF_TYPES | self.TEXT_TYPES

    def extract(self, data: bytes, content_type: str) -> str:
        media_type, params = parse_content_type(content_type)
        handler = self._handler_for(media_type)
        text = handler(data, params).strip()
        if not text:
            raise EmptyResultError(f"No text could be extracted from {media_type} content")
        Log.debug(f"Extracted {len(text)} chars", content_type=media_type)
        return text

    def _handler_for(
        self, media_type: str
    ) -> Callable[[bytes, dict[str, str]], str]:
        if media_type in self.PDF_TYPES:
            return self._extract_pdf
        if media_type in self.TEXT_TYPES:
            return self._decode_text
        raise UnsupportedFormatError(
            f"Content type '{media_type or 'unknown'}' is not supported; "
            f"expected one of {sorted(self.supported_types)}"
        )

    def _extract_pdf(self, data: bytes, _params: dict[str, str]) -> str:
        try:
            pages = self._pdf_engine.extract_pages(data)
        except PdfExtractionError as exc:
            raise CorruptInputError(str(exc)) from exc
        return "\n".join(page.strip() for page in pages if page.strip())

    @staticmethod
    def _decode_text(data: bytes, params: dict[str, str]) -> str:
        charset = params.get("charset", "utf-8")
        try:
            return data.decode(charset)
        except LookupError as exc:
            raise UnsupportedFormatError(f"Unknown charset '{charset}'") from exc
        except UnicodeDecodeError as exc:
            raise CorruptInputError(f"Text is not valid {charset}: {exc}") from exc
