"""Near-duplicate detection over a result set using word-set Jaccard similarity."""

from __future__ import annotations

import re

from argus.pipeline.models import SearchResult

DEFAULT_THRESHOLD = 0.8

_TOKEN_SPLIT = re.compile(r"[\s.,!?;:]+")


def word_set(text: str) -> set[str]:
    return {w for w in _TOKEN_SPLIT.split(text.lower()) if len(w) > 2}


def jaccard_similarity(first: str, second: str) -> float:
    """Word-set Jaccard similarity. Two texts without usable words score 1.0."""
    a = word_set(first)
    b = word_set(second)
    if not a and not b:
        return 1.0
    return len(a & b) / len(a | b)


def _comparable_text(result: SearchResult) -> str:
    return f"{result.title} {result.snippet}"


def find_duplicate_pairs(
    results: list[SearchResult], threshold: float = DEFAULT_THRESHOLD
) -> list[tuple[int, int]]:
    """Index pairs (i, j), i < j, whose similarity is at or above ``threshold``."""
    texts = [_comparable_text(r) for r in results]
    pairs: list[tuple[int, int]] = []
    for i in range(len(texts)):
        for j in range(i + 1, len(texts)):
            if jaccard_similarity(texts[i], texts[j]) >= threshold:
                pairs.append((i, j))
    return pairs


def mark_duplicates(results: list[SearchResult], threshold: float = DEFAULT_THRESHOLD) -> int:
    """Flag the later member of every duplicate pair. Returns the number flagged."""
    pairs = find_duplicate_pairs(results, threshold)
    flagged = {j for _, j in pairs}
    for index in flagged:
        results[index].is_duplicate = True
    return len(flagged)
