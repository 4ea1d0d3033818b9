"""Sentence splitting for feedback text."""

import re

SENTENCE_BOUNDARY = re.compile(r"[.!?]+")


def split_into_sentences(text: str, min_length: int = 10) -> list[str]:
    """
    Split feedback text into sentences on runs of '.', '!' and '?'.

    Fragments are stripped, and fragments shorter than min_length are
    dropped. If nothing survives, the whole stripped text is returned as a
    single sentence so short posts are still analyzed.

    Args:
        text: Raw feedback text.
        min_length: Shortest fragment kept as a sentence.

    Returns:
        List of sentence strings in text order.

    Raises:
        ValueError: If text is not a non-empty string.
    """
    if not isinstance(text, str) or not text.strip():
        raise ValueError("Text must be a non-empty string")

    sentences = [fragment.strip() for fragment in SENTENCE_BOUNDARY.split(text)]
    sentences = [s for s in sentences if s and len(s) >= min_length]

    return sentences or [text.strip()]
