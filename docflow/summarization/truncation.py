from dataclasses import dataclass


@dataclass(frozen=True)
class TruncatedText:
    text: str
    truncated: bool


def truncate_to_fit(text: str, max_chars: int) -> TruncatedText:
    """Keep the longest prefix of ``text`` no longer than ``max_chars``.

    Deterministic: the same input and limit always yield the same prefix.
    """
    if max_chars <= 0:
        raise ValueError("max_chars must be positive")
    if len(text) <= max_chars:
        return TruncatedText(text=text, truncated=False)
    return TruncatedText(text=text[:max_chars], truncated=True)
