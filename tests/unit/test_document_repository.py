import uuid
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
from psycopg.types.json import Jsonb

from docflow.database.exceptions import DocumentNotFoundError
from docflow.database.repositories.document_repository import DocumentRepository
from docflow.processor.models import Document, DocumentStatus

DOC_ID = "550e8400-e29b-41d4-a716-446655440000"
NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _make_row(**overrides: object) -> dict:
    row = {
        "id": uuid.UUID(DOC_ID),
        "file_name": "report.pdf",
        "content_type": "application/pdf",
        "size_bytes": 2048,
        "storage_locator": f"{DOC_ID}/report.pdf",
        "status": "pending",
        "extracted_text": None,
        "summary": None,
        "summary_metadata": None,
        "error_message": None,
        "created_at": NOW,
        "updated_at": NOW,
        "is_deleted": False,
    }
    row.update(overrides)
    return row


def _make_document(status: DocumentStatus = DocumentStatus.PENDING, **fields: object) -> Document:
    return Document(
        id=DOC_ID,
        file_name="report.pdf",
        content_type="application/pdf",
        size_bytes=2048,
        storage_locator=f"{DOC_ID}/report.pdf",
        status=status,
        created_at=NOW,
        updated_at=NOW,
        **fields,  # type: ignore[arg-type]
    )


def _mock_connection(mock_get_conn: MagicMock) -> tuple[MagicMock, MagicMock]:
    """Wire up a mock connection + cursor and return (mock_conn, mock_cursor)."""
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    mock_get_conn.return_value.__enter__ = MagicMock(return_value=mock_conn)
    mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn, mock_cursor


class TestCreate:
    @patch("docflow.database.repositories.document_repository.get_connection")
    def test_inserts_and_returns_document(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = _make_row()

        result = DocumentRepository().create(_make_document())

        assert result == _make_document()
        sql, params = mock_cursor.execute.call_args.args
        assert "INSERT INTO documents" in sql
        assert params[0] == uuid.UUID(DOC_ID)
        assert params[5] == "pending"
        mock_conn.commit.assert_called_once()

    @patch("docflow.database.repositories.document_repository.get_connection")
    def test_invalid_id_raises_not_found(self, mock_get_conn: MagicMock) -> None:
        _mock_connection(mock_get_conn)
        document = Document(
            id="not-a-uuid",
            file_name="a",
            content_type="text/plain",
            size_bytes=1,
            storage_locator="a",
        )
        with pytest.raises(DocumentNotFoundError):
            DocumentRepository().create(document)


class TestLoad:
    @patch("docflow.database.repositories.document_repository.get_connection")
    def test_maps_row_to_document(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = _make_row(
            status="processed",
            extracted_text="text",
            summary="summary",
            summary_metadata={"model_id": "m"},
        )

        result = DocumentRepository().load(DOC_ID)

        assert result.id == DOC_ID
        assert result.status is DocumentStatus.PROCESSED
        assert result.summary == "summary"
        assert result.summary_metadata == {"model_id": "m"}
        sql = mock_cursor.execute.call_args.args[0]
        assert "NOT is_deleted" in sql

    @patch("docflow.database.repositories.document_repository.get_connection")
    def test_raises_not_found_when_missing(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        with pytest.raises(DocumentNotFoundError, match=f"Document {DOC_ID} not found"):
            DocumentRepository().load(DOC_ID)

    @patch("docflow.database.repositories.document_repository.get_connection")
    def test_malformed_id_raises_not_found_without_query(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)

        with pytest.raises(DocumentNotFoundError, match="nope"):
            DocumentRepository().load("nope")
        mock_cursor.execute.assert_not_called()


class TestSave:
    @patch("docflow.database.repositories.document_repository.get_connection")
    def test_compare_and_set_adds_status_guard(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 1
        document = _make_document(DocumentStatus.PROCESSING)

        saved = DocumentRepository().save(document, expected_status=DocumentStatus.PENDING)

        assert saved is True
        sql, params = mock_cursor.execute.call_args.args
        assert sql.rstrip().endswith("AND status = %s")
        assert params[0] == "processing"
        assert params[-1] == "pending"
        mock_conn.commit.assert_called_once()

    @patch("docflow.database.repositories.document_repository.get_connection")
    def test_returns_false_when_status_changed(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 0

        saved = DocumentRepository().save(
            _make_document(DocumentStatus.PROCESSING),
            expected_status=DocumentStatus.PENDING,
        )

        assert saved is False

    @patch("docflow.database.repositories.document_repository.get_connection")
    def test_unconditional_save_of_missing_document_raises(
        self, mock_get_conn: MagicMock
    ) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 0

        with pytest.raises(DocumentNotFoundError):
            DocumentRepository().save(_make_document())

    @patch("docflow.database.repositories.document_repository.get_connection")
    def test_wraps_summary_metadata_in_jsonb(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 1
        document = _make_document(
            DocumentStatus.PROCESSED,
            summary="s",
            summary_metadata={"truncated": False},
        )

        DocumentRepository().save(document)

        params = mock_cursor.execute.call_args.args[1]
        assert isinstance(params[3], Jsonb)
        assert params[3].obj == {"truncated": False}


class TestListing:
    @patch("docflow.database.repositories.document_repository.get_connection")
    def test_list_active_maps_all_rows(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        other_id = str(uuid.uuid4())
        mock_cursor.fetchall.return_value = [_make_row(), _make_row(id=uuid.UUID(other_id))]

        result = DocumentRepository().list_active()

        assert [d.id for d in result] == [DOC_ID, other_id]

    @patch("docflow.database.repositories.document_repository.get_connection")
    def test_list_stale_filters_processing(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = []

        DocumentRepository().list_stale(NOW)

        params = mock_cursor.execute.call_args.args[1]
        assert params == ("processing", NOW)


class TestSoftDelete:
    @patch("docflow.database.repositories.document_repository.get_connection")
    def test_marks_deleted(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 1

        DocumentRepository().soft_delete(DOC_ID)

        assert "is_deleted = TRUE" in mock_cursor.execute.call_args.args[0]
        mock_conn.commit.assert_called_once()

    @patch("docflow.database.repositories.document_repository.get_connection")
    def test_missing_document_raises(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 0

        with pytest.raises(DocumentNotFoundError):
            DocumentRepository().soft_delete(DOC_ID)
        mock_conn.commit.assert_not_called()
