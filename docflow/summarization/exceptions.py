class SummarizerError(Exception):
    """Raised when a summary cannot be produced."""

    retryable = False


class RemoteUnavailableError(SummarizerError):
    """Raised on network failures, timeouts and provider-side outages."""

    retryable = True


class RateLimitedError(SummarizerError):
    """Raised when the provider asks the caller to back off."""

    retryable = True


class InvalidResponseError(SummarizerError):
    """Raised when the provider answers with no usable summary."""


class AuthError(SummarizerError):
    """Raised when credentials are missing, invalid or lack permission."""
