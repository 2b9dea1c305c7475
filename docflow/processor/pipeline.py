import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass

from docflow.processor.models import Document
from docflow.summarization.models import SummaryOptions, SummaryResult


@dataclass(slots=True)
class PipelineContext:
    """State carried through one processing attempt of one document."""

    document: Document
    options: SummaryOptions | None = None
    cancel_event: threading.Event | None = None
    raw_bytes: bytes = b""
    extracted_text: str = ""
    summary_result: SummaryResult | None = None

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
