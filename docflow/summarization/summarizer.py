"""AI-powered document summarizer."""

from pathlib import Path

from docflow.logging.logger import Log
from docflow.summarization.base import BaseSummarizer
from docflow.summarization.client_base import BaseSummarizationClient
from docflow.summarization.exceptions import InvalidResponseError
from docflow.summarization.models import SummaryOptions, SummaryResult
from docflow.summarization.prompt_loader import load_prompt_template
from docflow.summarization.truncation import truncate_to_fit

DEFAULT_SYSTEM_PROMPT = (
    "You are a careful assistant that writes short, faithful summaries of documents."
)


class Summarizer(BaseSummarizer):
    """Summarizes extracted text with a chat-completion provider."""

    def __init__(
        self,
        *,
        client: BaseSummarizationClient,
        model_id: str,
        max_tokens: int = 512,
        max_input_chars: int = 48_000,
        temperature: float = 0.2,
        timeout_seconds: float | None = None,
        prompt_template_path: Path | None = None,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ) -> None:
        if max_tokens <= 0:
            raise ValueError("max_tokens must be positive")
        if max_input_chars <= 0:
            raise ValueError("max_input_chars must be positive")
        self._client = client
        self._model_id = model_id
        self._max_tokens = max_tokens
        self._max_input_chars = max_input_chars
        self._temperature = max(0.0, min(1.0, temperature))
        self._timeout_seconds = timeout_seconds
        self._system_prompt = system_prompt
        self._prompt_template = load_prompt_template(prompt_template_path)

    def summarize(self, text: str, options: SummaryOptions | None = None) -> SummaryResult:
        options = options or SummaryOptions()
        model_id = options.model_id or self._model_id
        max_tokens = options.max_tokens or self._max_tokens
        timeout_seconds = (
            options.timeout_seconds
            if options.timeout_seconds is not None
            else self._timeout_seconds
        )

        fitted = truncate_to_fit(text, self._max_input_chars)
        if fitted.truncated:
            Log.warning(
                "Input truncated before summarization",
                input_chars=len(text),
                submitted_chars=len(fitted.text),
            )

        prompt = self._build_prompt(fitted.text)
        Log.debug(f"Summarization prompt:\n{prompt}")
        raw_response = self._client.create_chat_completion(
            model=model_id,
            max_tokens=max_tokens,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            timeout_seconds=timeout_seconds,
        )
        Log.debug(f"AI raw response:\n{raw_response}")

        summary = self._clean(raw_response)
        if not summary:
            raise InvalidResponseError("AI returned an empty summary")

        Log.info(f"Summarization complete: {len(summary)} chars", model_id=model_id)
        return SummaryResult(
            text=summary,
            model_id=model_id,
            truncated=fitted.truncated,
            input_chars=len(text),
            submitted_chars=len(fitted.text),
        )

    def _build_prompt(self, text: str) -> str:
        return self._prompt_template.replace("{text}", text)

    @staticmethod
    def _clean(raw: str) -> str:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines).strip()
        return cleaned
