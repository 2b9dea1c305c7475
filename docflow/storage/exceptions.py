class StorageError(Exception):
    """Raised when stored document bytes cannot be written or read."""

    retryable = False


class StorageNotFoundError(StorageError):
    """Raised when a locator does not point at stored bytes."""


class StorageBackendUnavailableError(StorageError):
    """Raised when the underlying medium cannot be reached."""

    retryable = True
