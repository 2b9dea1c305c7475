from pathlib import Path

from docflow.summarization.exceptions import SummarizerError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(path: Path | None = None) -> str:
    """Load the summarization prompt template from a file.

    Args:
        path: Path to the prompt template file.
              Defaults to the bundled summary_prompt.txt.

    Returns:
        The raw template string with a ``{text}`` placeholder.

    Raises:
        SummarizerError: if the file cannot be read or lacks the placeholder.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "summary_prompt.txt"
    try:
        template = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SummarizerError(f"Failed to load prompt template: {exc}") from exc
    if "{text}" not in template:
        raise SummarizerError(f"Prompt template {path} has no {{text}} placeholder")
    return template
