"""Fuzzy matching of a query against free text.

Matching walks a fixed ladder and stops at the first tier that succeeds:
substring containment, case-insensitive equality, partial-ratio similarity,
and finally the remembered variations of the query.
"""

from __future__ import annotations

import re

from fuzzywuzzy import fuzz

from argus.matching.variations import generate_variations
from argus.pipeline.models import FuzzyMatchInfo, MatchType

PHONETIC_PAIRS: list[tuple[str, str]] = [
    ("f", "ph"),
    ("c", "k"),
    ("s", "z"),
    ("ei", "ai"),
    ("y", "i"),
]

TITLE_WEIGHT = 3
SNIPPET_WEIGHT = 2
CONTENT_WEIGHT = 1

_WORD_SPLIT = re.compile(r"[ .,!?;:\n\r\t]")
_SENTENCE_SPLIT = re.compile(r"[.!?]")


def is_phonetic_match(first: str, second: str) -> bool:
    """True when one phonetic substitution makes both strings equal."""
    a = first.lower()
    b = second.lower()
    for source, target in PHONETIC_PAIRS:
        if a.replace(source, target) == b.replace(source, target):
            return True
    return False


def _initials(text: str) -> str:
    return "".join(word[0] for word in text.split())


def is_abbreviation(query: str, text: str) -> bool:
    """True when one side spells the initials of the other, multi-word, side.

    Spaces on the abbreviated side are ignored, so "J S" abbreviates "Jon Smith".
    """
    for full, short in ((text, query), (query, text)):
        if len(full.split()) < 2:
            continue
        if _initials(full).lower() == short.replace(" ", "").lower():
            return True
    return False


class FuzzyMatcher:
    """Scores a query against text.

    Variations generated through ``generate_variations`` are remembered and
    used as the last matching tier. Use one matcher per scan so that the
    remembered set belongs to a single query.
    """

    def __init__(self, min_similarity_score: int = 70) -> None:
        if not 0 <= min_similarity_score <= 100:
            raise ValueError("min_similarity_score must be within 0-100")
        self._min_score = min_similarity_score
        self._variations: list[str] = []

    @property
    def min_similarity_score(self) -> int:
        return self._min_score

    @property
    def variations(self) -> list[str]:
        return list(self._variations)

    def generate_variations(self, name: str) -> list[str]:
        variations = generate_variations(name)
        self.remember(variations)
        return variations

    def remember(self, variations: list[str]) -> None:
        """Add variations (e.g. agent-supplied ones) to the fallback tier."""
        known = set(self._variations)
        for variation in variations:
            if variation and variation not in known:
                self._variations.append(variation)
                known.add(variation)

    def match(self, query: str, text: str) -> FuzzyMatchInfo | None:
        if not query or not query.strip() or not text:
            return None

        query_lower = query.lower()
        text_lower = text.lower()

        if query_lower in text_lower:
            return FuzzyMatchInfo(
                original_query=query,
                matched_text=text,
                similarity_score=100,
                match_type=MatchType.EXACT,
            )

        if query_lower == text_lower:
            return FuzzyMatchInfo(
                original_query=query,
                matched_text=text,
                similarity_score=95,
                match_type=MatchType.CASE_INSENSITIVE,
            )

        score = fuzz.partial_ratio(query_lower, text_lower)
        if score >= self._min_score:
            return FuzzyMatchInfo(
                original_query=query,
                matched_text=text,
                similarity_score=score,
                match_type=self._classify(query, text, score),
                variations=list(self._variations),
            )

        for variation in self._variations:
            variation_score = fuzz.partial_ratio(variation.lower(), text_lower)
            if variation_score >= self._min_score:
                return FuzzyMatchInfo(
                    original_query=query,
                    matched_text=text,
                    similarity_score=variation_score,
                    match_type=MatchType.TYPO_TOLERANT,
                    variations=[variation],
                )

        return None

    @staticmethod
    def _classify(query: str, text: str, score: int) -> MatchType:
        if score == 100:
            return MatchType.EXACT
        if score >= 90:
            return MatchType.CASE_INSENSITIVE
        if score >= 80:
            return MatchType.TYPO_TOLERANT
        if is_phonetic_match(query, text):
            return MatchType.PHONETIC
        if is_abbreviation(query, text):
            return MatchType.ABBREVIATED
        return MatchType.PARTIAL

    def find_all_matches(self, query: str, text: str) -> list[FuzzyMatchInfo]:
        """Match every word and sentence of ``text`` independently.

        Results are unique by matched text and sorted by descending score.
        """
        if not query or not text:
            return []

        fragments = [w for w in _WORD_SPLIT.split(text) if w.strip()]
        fragments += [s.strip() for s in _SENTENCE_SPLIT.split(text) if s.strip()]

        matches: list[FuzzyMatchInfo] = []
        seen: set[str] = set()
        for fragment in fragments:
            info = self.match(query, fragment)
            if info is None or info.matched_text in seen:
                continue
            seen.add(info.matched_text)
            matches.append(info)

        matches.sort(key=lambda m: m.similarity_score, reverse=True)
        return matches

    def best_score(self, query: str, text: str) -> int:
        matches = self.find_all_matches(query, text)
        return matches[0].similarity_score if matches else 0

    def document_similarity(self, query: str, title: str, snippet: str, content: str) -> int:
        """Weighted average of the best per-field scores.

        Fields without a match are left out of the average, so a title-only
        match of 90 yields 270. Callers must not assume the result is <= 100.
        """
        weighted = [
            self.best_score(query, title) * TITLE_WEIGHT,
            self.best_score(query, snippet) * SNIPPET_WEIGHT,
            self.best_score(query, content) * CONTENT_WEIGHT,
        ]
        contributing = [score for score in weighted if score > 0]
        if not contributing:
            return 0
        return round(sum(contributing) / len(contributing))
