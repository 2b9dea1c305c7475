from dataclasses import dataclass


@dataclass(frozen=True)
class SummaryOptions:
    """Per-call overrides; ``None`` falls back to the configured default."""

    max_tokens: int | None = None
    model_id: str | None = None
    timeout_seconds: float | None = None


@dataclass(frozen=True)
class SummaryResult:
    """Output of the summarization step."""

    text: str
    model_id: str
    truncated: bool = False
    input_chars: int = 0
    submitted_chars: int = 0
