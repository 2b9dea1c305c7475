import httpx
import openai

from docflow.summarization.client_base import BaseSummarizationClient
from docflow.summarization.exceptions import (
    AuthError,
    InvalidResponseError,
    RateLimitedError,
    RemoteUnavailableError,
)


class OpenAIClientAdapter(BaseSummarizationClient):
    """Summarization client built on the OpenAI-compatible chat API.

    SDK-level retries are disabled: one call per attempt, failures are
    reported to the orchestrator as they happen.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: float,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

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
        request: dict[str, object] = {}
        if timeout_seconds is not None:
            request["timeout"] = timeout_seconds
        try:
            response = self._client.chat.completions.create(
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                **request,  # type: ignore[arg-type]
            )
        except (openai.APITimeoutError, httpx.TimeoutException) as exc:
            raise RemoteUnavailableError(f"AI provider timed out: {exc}") from exc
        except (openai.APIConnectionError, httpx.ConnectError) as exc:
            raise RemoteUnavailableError(f"AI provider network error: {exc}") from exc
        except openai.RateLimitError as exc:
            raise RateLimitedError(f"AI provider rate limit reached: {exc}") from exc
        except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            raise AuthError(f"AI provider rejected credentials: {exc}") from exc
        except openai.APIStatusError as exc:
            if exc.status_code >= 500:
                raise RemoteUnavailableError(
                    f"AI provider server error (HTTP {exc.status_code}): {exc}"
                ) from exc
            raise InvalidResponseError(
                f"AI provider rejected the request (HTTP {exc.status_code}): {exc}"
            ) from exc
        except openai.APIResponseValidationError as exc:
            raise InvalidResponseError(f"AI provider returned malformed data: {exc}") from exc
        except openai.APIError as exc:
            raise RemoteUnavailableError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise InvalidResponseError("AI returned no choices")
        content = response.choices[0].message.content
        if content is None or not content.strip():
            raise InvalidResponseError("AI returned empty response")
        return content
