"""Offline summarization client.

Use this module as a reference when implementing new provider adapters.
Implement BaseSummarizationClient and register the provider in SummarizerFactory.
"""

import re
from typing import ClassVar

from docflow.summarization.client_base import BaseSummarizationClient


class ExampleClientAdapter(BaseSummarizationClient):
    """Returns the first sentences of the document embedded in the prompt.

    No network calls. Useful for local development and tests: the output is
    deterministic for a given prompt.
    """

    MAX_SENTENCES: ClassVar[int] = 3

    _DOCUMENT_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"<document>\s*(.*?)\s*</document>", re.DOTALL
    )
    _SENTENCE_RE: ClassVar[re.Pattern[str]] = re.compile(r"[^.!?]+[.!?]?")

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
        _ = model, temperature, system_prompt, timeout_seconds
        match = self._DOCUMENT_RE.search(user_prompt)
        body = match.group(1) if match else user_prompt
        flattened = " ".join(body.split())
        sentences = [s.strip() for s in self._SENTENCE_RE.findall(flattened) if s.strip()]
        summary = " ".join(sentences[: self.MAX_SENTENCES])
        # roughly four characters per token
        return summary[: max_tokens * 4]
