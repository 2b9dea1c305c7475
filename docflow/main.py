import argparse
import json
import mimetypes
from collections.abc import Sequence
from pathlib import Path

from docflow.config.settings import Settings
from docflow.database.connection import apply_schema, close_pool, init_pool
from docflow.logging.logger import Log
from docflow.processor.models import Document, StatusView
from docflow.processor.service import DocumentService, build_service


def _document_json(document: Document) -> dict[str, object]:
    return {
        "id": document.id,
        "file_name": document.file_name,
        "status": document.status.value,
        "summary": document.summary,
        "summary_metadata": document.summary_metadata,
        "error_message": document.error_message,
        "updated_at": document.updated_at.isoformat(),
    }


def _status_json(view: StatusView) -> dict[str, object]:
    return {
        "id": view.document_id,
        "status": view.status.value,
        "summary": view.summary,
        "error_message": view.error_message,
        "updated_at": view.updated_at.isoformat() if view.updated_at else None,
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docflow", description="Document summarization pipeline")
    commands = parser.add_subparsers(dest="command", required=True)

    submit = commands.add_parser("submit", help="store a file and create a pending document")
    submit.add_argument("path", type=Path)
    submit.add_argument("--content-type", default=None)

    for name, help_text in (
        ("process", "process a pending document"),
        ("retry", "re-run a failed or processed document"),
        ("status", "show a document's status"),
        ("delete", "soft-delete a document"),
    ):
        command = commands.add_parser(name, help=help_text)
        command.add_argument("document_id")

    commands.add_parser("list", help="list active documents")
    commands.add_parser("process-pending", help="process all pending documents")
    reap = commands.add_parser("reap-stale", help="fail documents stuck in processing")
    reap.add_argument("--older-than", type=int, default=None, metavar="SECONDS")
    commands.add_parser("init-db", help="create the documents table if missing")
    return parser


def run_command(service: DocumentService, args: argparse.Namespace) -> object:
    """Execute one CLI command and return a JSON-serializable result."""
    if args.command == "submit":
        content_type = args.content_type or mimetypes.guess_type(args.path.name)[0] or ""
        document_id = service.submit(args.path.read_bytes(), args.path.name, content_type)
        return _status_json(service.get_status(document_id))
    if args.command == "process":
        return _document_json(service.process_document(args.document_id))
    if args.command == "retry":
        return _document_json(service.retry(args.document_id))
    if args.command == "status":
        return _status_json(service.get_status(args.document_id))
    if args.command == "delete":
        service.delete(args.document_id)
        return {"id": args.document_id, "deleted": True}
    if args.command == "list":
        return [_document_json(d) for d in service.list_active()]
    if args.command == "process-pending":
        return [_document_json(d) for d in service.process_pending()]
    if args.command == "reap-stale":
        return [_document_json(d) for d in service.reap_stale(args.older_than)]
    raise ValueError(f"Unknown command '{args.command}'")


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point: settings -> pool -> service -> command."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        if args.command == "init-db":
            apply_schema()
            Log.info("Database schema applied")
            return
        service = build_service(settings)
        result = run_command(service, args)
        print(json.dumps(result, indent=2, default=str))
    finally:
        close_pool()


if __name__ == "__main__":
    main()
