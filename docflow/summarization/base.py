from abc import ABC, abstractmethod

from docflow.summarization.models import SummaryOptions, SummaryResult


class BaseSummarizer(ABC):
    """Contract for all summarization adapters."""

    @abstractmethod
    def summarize(self, text: str, options: SummaryOptions | None = None) -> SummaryResult:
        """Summarize extracted document text.

        Text longer than the model's input window is cut to the longest
        prefix that fits; ``SummaryResult.truncated`` reports it.

        Raises:
            SummarizerError: on any failure (see subclasses).
        """
