import uuid
from datetime import datetime
from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from docflow.database.connection import get_connection
from docflow.database.exceptions import DocumentNotFoundError
from docflow.database.repositories.base import BaseDocumentRepository
from docflow.processor.models import Document, DocumentStatus

_COLUMNS = """
    id, file_name, content_type, size_bytes, storage_locator, status,
    extracted_text, summary, summary_metadata, error_message,
    created_at, updated_at, is_deleted
"""


def _document_uuid(document_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(document_id)
    except ValueError as exc:
        raise DocumentNotFoundError(f"Document {document_id} not found") from exc


def _row_to_document(row: dict[str, Any]) -> Document:
    return Document(
        id=str(row["id"]),
        file_name=row["file_name"],
        content_type=row["content_type"],
        size_bytes=row["size_bytes"],
        storage_locator=row["storage_locator"],
        status=DocumentStatus(row["status"]),
        extracted_text=row["extracted_text"],
        summary=row["summary"],
        summary_metadata=row["summary_metadata"],
        error_message=row["error_message"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        is_deleted=row["is_deleted"],
    )


class DocumentRepository(BaseDocumentRepository):
    """Database operations for the documents table."""

    def create(self, document: Document) -> Document:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    INSERT INTO documents
                    (id, file_name, content_type, size_bytes, storage_locator, status,
                     created_at, updated_at)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING {_COLUMNS}
                    """,
                    (
                        _document_uuid(document.id),
                        document.file_name,
                        document.content_type,
                        document.size_bytes,
                        document.storage_locator,
                        document.status.value,
                        document.created_at,
                        document.updated_at,
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError(f"Insert of document {document.id} returned no row")
        return _row_to_document(row)

    def load(self, document_id: str) -> Document:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM documents
                    WHERE id = %s AND NOT is_deleted
                    """,
                    (_document_uuid(document_id),),
                )
                row = cur.fetchone()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")
        return _row_to_document(row)

    def save(
        self,
        document: Document,
        *,
        expected_status: DocumentStatus | None = None,
    ) -> bool:
        metadata = (
            Jsonb(document.summary_metadata)
            if document.summary_metadata is not None
            else None
        )
        sql = """
            UPDATE documents
            SET status = %s,
                extracted_text = %s,
                summary = %s,
                summary_metadata = %s,
                error_message = %s,
                updated_at = %s
            WHERE id = %s AND NOT is_deleted
        """
        params: list[Any] = [
            document.status.value,
            document.extracted_text,
            document.summary,
            metadata,
            document.error_message,
            document.updated_at,
            _document_uuid(document.id),
        ]
        if expected_status is not None:
            sql += " AND status = %s"
            params.append(expected_status.value)

        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, tuple(params))
                updated = cur.rowcount
            conn.commit()

        if updated == 0 and expected_status is None:
            raise DocumentNotFoundError(f"Document {document.id} not found")
        return updated > 0

    def list_active(self) -> list[Document]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM documents
                    WHERE NOT is_deleted
                    ORDER BY created_at
                    """
                )
                rows = cur.fetchall()
        return [_row_to_document(row) for row in rows]

    def list_stale(self, older_than: datetime) -> list[Document]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS}
                    FROM documents
                    WHERE NOT is_deleted
                      AND status = %s
                      AND updated_at < %s
                    ORDER BY updated_at
                    """,
                    (DocumentStatus.PROCESSING.value, older_than),
                )
                rows = cur.fetchall()
        return [_row_to_document(row) for row in rows]

    def soft_delete(self, document_id: str) -> None:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE documents
                    SET is_deleted = TRUE, updated_at = NOW()
                    WHERE id = %s AND NOT is_deleted
                    """,
                    (_document_uuid(document_id),),
                )
                if cur.rowcount == 0:
                    raise DocumentNotFoundError(f"Document {document_id} not found")
            conn.commit()
