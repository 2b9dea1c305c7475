from docflow.summarization.base import BaseSummarizer
from docflow.summarization.factory import SummarizerFactory
from docflow.summarization.models import SummaryOptions, SummaryResult
from docflow.summarization.summarizer import Summarizer

__all__ = [
    "BaseSummarizer",
    "Summarizer",
    "SummarizerFactory",
    "SummaryOptions",
    "SummaryResult",
]
