import io
from pathlib import Path

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from docflow.config.settings import Settings
from docflow.database.repositories.memory_repository import InMemoryDocumentRepository
from docflow.storage.local_adapter import LocalStorageBackend


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with full sentences on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "The quarterly report covers revenue growth.")
    c.drawString(72, 700, "Sales rose in every region.")
    c.showPage()
    c.drawString(72, 720, "Costs stayed flat over the period.")
    c.drawString(72, 700, "The board approved the budget.")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        storage_backend="local",
        storage_local_root=tmp_path / "files",
        summarization_provider="example",
        process_on_submit=False,
    )


@pytest.fixture()
def memory_repo() -> InMemoryDocumentRepository:
    return InMemoryDocumentRepository()


@pytest.fixture()
def local_storage(tmp_path: Path) -> LocalStorageBackend:
    root = tmp_path / "files"
    root.mkdir()
    return LocalStorageBackend(files_root=root)
