from docflow.config.settings import Settings
from docflow.logging.logger import Log
from docflow.storage.base import BaseStorageBackend
from docflow.storage.local_adapter import LocalStorageBackend
from docflow.storage.s3_adapter import S3StorageBackend


class StorageBackendFactory:
    """Selects the storage backend once, at process start."""

    BACKENDS: tuple[str, ...] = ("auto", "local", "s3")

    @classmethod
    def create(cls, settings: Settings) -> BaseStorageBackend:
        backend = cls.resolve_backend_name(settings)
        if backend == "s3":
            storage: BaseStorageBackend = S3StorageBackend(
                bucket=settings.storage_s3_bucket,
                prefix=settings.storage_s3_prefix,
                region=settings.storage_s3_region,
                endpoint_url=settings.storage_s3_endpoint_url,
            )
        else:
            storage = LocalStorageBackend(files_root=settings.storage_local_root)
        Log.info(f"Storage backend selected: {storage.name}")
        return storage

    @classmethod
    def resolve_backend_name(cls, settings: Settings) -> str:
        """``auto`` means S3 when a bucket is configured, local disk otherwise."""
        backend = settings.storage_backend.lower()
        if backend not in cls.BACKENDS:
            raise ValueError(
                f"Unknown storage backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
            )
        if backend == "auto":
            return "s3" if settings.storage_s3_bucket.strip() else "local"
        if backend == "s3" and not settings.storage_s3_bucket.strip():
            raise ValueError("storage_s3_bucket is required for storage_backend=s3")
        return backend
