from docflow.config.settings import Settings
from docflow.pdf.base import BasePdfEngine
from docflow.pdf.pdfplumber_adapter import PdfPlumberEngine
from docflow.pdf.pymupdf_adapter import PyMuPdfEngine


class PdfEngineFactory:
    """Creates the PDF engine named by ``settings.pdf_engine``."""

    ENGINES: dict[str, type[BasePdfEngine]] = {
        "pdfplumber": PdfPlumberEngine,
        "pymupdf": PyMuPdfEngine,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfEngine:
        engine = settings.pdf_engine.lower()
        engine_cls = cls.ENGINES.get(engine)
        if engine_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ENGINES)}"
            )
        return engine_cls()
