import os
import tempfile
from pathlib import Path

from docflow.logging.logger import Log
from docflow.storage.base import BaseStorageBackend
from docflow.storage.exceptions import StorageBackendUnavailableError, StorageNotFoundError
from docflow.storage.models import StorageMetadata


def document_file_path(files_root: Path, document_id: str, file_name: str) -> Path:
    """Build path to document file: {files_root}/{document_id}/{file_name}"""
    return files_root / document_id / file_name


class LocalStorageBackend(BaseStorageBackend):
    """Stores document bytes on the local filesystem under a single root."""

    name = "local"

    def __init__(self, files_root: Path) -> None:
        self._files_root = files_root

    def put(self, data: bytes, metadata: StorageMetadata) -> str:
        path = document_file_path(
            self._files_root, metadata.document_id, metadata.safe_file_name()
        )
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".upload-")
            try:
                with os.fdopen(fd, "wb") as tmp:
                    tmp.write(data)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageBackendUnavailableError(
                f"Cannot write to local storage at {self._files_root}: {exc}"
            ) from exc

        locator = path.relative_to(self._files_root).as_posix()
        Log.debug(f"Stored {len(data)} bytes locally", locator=locator)
        return locator

    def get(self, locator: str) -> bytes:
        path = self._resolve_path(locator)
        if not path.is_file():
            raise StorageNotFoundError(f"File not found: {locator}")
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise StorageNotFoundError(f"File not found: {locator}") from exc
        except OSError as exc:
            raise StorageBackendUnavailableError(
                f"Cannot read {locator} from local storage: {exc}"
            ) from exc

    def exists(self, locator: str) -> bool:
        try:
            return self._resolve_path(locator).is_file()
        except StorageNotFoundError:
            return False

    def _resolve_path(self, locator: str) -> Path:
        if not self._files_root.is_dir():
            raise StorageBackendUnavailableError(
                f"Local storage root {self._files_root} is not available"
            )
        root = self._files_root.resolve()
        path = (root / locator).resolve()
        if not path.is_relative_to(root) or path == root:
            raise StorageNotFoundError(f"Locator {locator!r} is outside the storage root")
        return path
