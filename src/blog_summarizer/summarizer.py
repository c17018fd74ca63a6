"""Static extractive summary: first, longest, and last sentence."""

from __future__ import annotations

import re
from typing import List

NO_CONTENT_MESSAGE = "No content available for summarization."
MIN_SENTENCE_CHARS = 20

_SENTENCE_BREAK = re.compile(r"[.!?]+")


def split_sentences(content: str) -> List[str]:
    """Split on runs of terminal punctuation, keeping fragments untrimmed."""
    return [part for part in _SENTENCE_BREAK.split(content) if part.strip()]


def _longest(sentences: List[str]) -> str:
    longest = ""
    for sentence in sentences:
        # Strictly longer, so ties keep the earlier sentence.
        if len(sentence) > len(longest):
            longest = sentence
    return longest


def summarize(content: str) -> str:
    """
    Build a summary from the first, longest, and last sentence of ``content``.

    Candidates are trimmed, deduplicated in their original order, and dropped
    when 20 characters or shorter. Survivors are joined with ". " and closed
    with a period, so content with no qualifying sentence yields ".".
    """
    sentences = split_sentences(content)
    if not sentences:
        return NO_CONTENT_MESSAGE

    candidates = [
        sentences[0].strip(),
        _longest(sentences).strip(),
        sentences[-1].strip(),
    ]
    parts: List[str] = []
    for candidate in candidates:
        if candidate in parts or len(candidate) <= MIN_SENTENCE_CHARS:
            continue
        parts.append(candidate)
    return ". ".join(parts) + "."


def is_degenerate(summary: str) -> bool:
    """True for summaries with no usable sentence (e.g. a lone ".")."""
    return len(summary.strip()) <= 2
