from dataclasses import dataclass


@dataclass(frozen=True)
class StorageMetadata:
    """Describes the blob being stored. Keys are derived from ``document_id``."""

    document_id: str
    file_name: str
    content_type: str = "application/octet-stream"

    def safe_file_name(self) -> str:
        """File name with directory components and traversal stripped."""
        name = self.file_name.replace("\\", "/").rsplit("/", 1)[-1]
        name = name.replace("..", "_").strip()
        if name in ("", "."):
            return "upload.bin"
        return name
