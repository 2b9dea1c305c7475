class RepositoryError(Exception):
    """Base exception for document persistence errors."""


class RepositoryUnavailableError(RepositoryError):
    """Raised when the database cannot be reached or the connection drops."""


class DocumentNotFoundError(RepositoryError):
    """Raised when a document does not exist or has been soft-deleted."""
