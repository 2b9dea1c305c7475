from typing import ClassVar

from docflow.config.settings import Settings
from docflow.summarization.base import BaseSummarizer
from docflow.summarization.client_base import BaseSummarizationClient
from docflow.summarization.example_client_adapter import ExampleClientAdapter
from docflow.summarization.openai_client_adapter import OpenAIClientAdapter
from docflow.summarization.summarizer import Summarizer


class SummarizerFactory:
    """Creates the configured summarizer from application settings."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseSummarizer:
        provider = settings.summarization_provider.lower()
        return Summarizer(
            client=cls.create_client(provider, settings),
            model_id=settings.summarization_model_id,
            max_tokens=settings.summarization_max_tokens,
            max_input_chars=settings.summarization_max_input_chars,
            temperature=settings.summarization_temperature,
            timeout_seconds=settings.summarization_timeout_seconds,
        )

    @classmethod
    def create_client(cls, provider: str, settings: Settings) -> BaseSummarizationClient:
        if provider == "example":
            return ExampleClientAdapter()
        return OpenAIClientAdapter(
            api_key=settings.summarization_api_key,
            timeout_seconds=settings.summarization_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        configured = settings.summarization_base_url.strip()
        if provider == "openai":
            return configured or None
        if provider == "openai_compatible":
            if not configured:
                raise ValueError(
                    "summarization_base_url is required for "
                    "summarization_provider=openai_compatible"
                )
            return configured
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return configured or default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown summarization provider '{provider}'. Choose from: {supported}"
        )
