from abc import ABC, abstractmethod


class BaseSummarizationClient(ABC):
    """Contract for provider-specific chat completion clients."""

    @abstractmethod
    def create_chat_completion(
        self,
        *,
        model: str,
        max_tokens: int,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        timeout_seconds: float | None = None,
    ) -> str:
        """Return the provider's reply as plain text.

        Raises:
            RemoteUnavailableError: network failure, timeout or server error.
            RateLimitedError: provider throttled the request.
            AuthError: credentials rejected.
            InvalidResponseError: reply missing or empty.
        """
