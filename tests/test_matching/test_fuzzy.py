"""Tests for the fuzzy matcher."""

from __future__ import annotations

import pytest

from argus.matching.fuzzy import FuzzyMatcher, is_abbreviation, is_phonetic_match
from argus.pipeline.models import MatchType


@pytest.fixture
def matcher():
    return FuzzyMatcher(min_similarity_score=70)


class TestMatch:
    @pytest.mark.parametrize("query", ["Jon Smith", "x", "Ünïcode Näme", "a.b@c"])
    def test_identity_is_exact(self, matcher, query):
        info = matcher.match(query, query)
        assert info is not None
        assert info.similarity_score == 100
        assert info.match_type == MatchType.EXACT

    def test_substring_case_insensitive(self, matcher):
        info = matcher.match("smith", "Profile of JON SMITH, Berlin")
        assert info.similarity_score == 100
        assert info.match_type == MatchType.EXACT
        assert info.original_query == "smith"

    def test_blank_query_never_matches(self, matcher):
        assert matcher.match("", "anything") is None
        assert matcher.match("   ", "anything") is None

    def test_empty_text_never_matches(self, matcher):
        assert matcher.match("jon", "") is None

    def test_below_threshold_returns_none(self, matcher):
        assert matcher.match("alexander", "qqqq wwww") is None

    def test_single_typo_is_typo_tolerant(self, matcher):
        info = matcher.match("jonathan", "jonathon")
        assert info is not None
        assert 80 <= info.similarity_score < 90
        assert info.match_type == MatchType.TYPO_TOLERANT

    def test_partial_ratio_match_carries_known_variations(self, matcher):
        matcher.remember(["jonny"])
        info = matcher.match("jonathan", "jonathon")
        assert info.variations == ["jonny"]

    def test_variation_tier(self, matcher):
        matcher.remember(["zed"])
        info = matcher.match("qqqq", "zed")
        assert info is not None
        assert info.match_type == MatchType.TYPO_TOLERANT
        assert info.variations == ["zed"]
        assert info.similarity_score == 100

    def test_variation_tier_none_when_nothing_clears(self, matcher):
        matcher.remember(["www"])
        assert matcher.match("qqqq", "zed") is None

    def test_generate_variations_are_remembered(self, matcher):
        variations = matcher.generate_variations("Jon Smith")
        assert matcher.variations == variations

    def test_remember_skips_duplicates(self, matcher):
        matcher.remember(["a", "b"])
        matcher.remember(["b", "c", ""])
        assert matcher.variations == ["a", "b", "c"]

    def test_min_score_validated(self):
        with pytest.raises(ValueError):
            FuzzyMatcher(min_similarity_score=101)

    def test_match_info_is_frozen(self, matcher):
        info = matcher.match("jon", "jon")
        with pytest.raises(Exception):
            info.similarity_score = 5


class TestClassification:
    def test_score_bands(self):
        assert FuzzyMatcher._classify("a", "b", 100) == MatchType.EXACT
        assert FuzzyMatcher._classify("a", "b", 93) == MatchType.CASE_INSENSITIVE
        assert FuzzyMatcher._classify("a", "b", 85) == MatchType.TYPO_TOLERANT

    def test_phonetic_band(self):
        assert FuzzyMatcher._classify("Stephen", "Stefen", 75) == MatchType.PHONETIC

    def test_abbreviated_band(self):
        assert FuzzyMatcher._classify("J S", "Jon Smith", 72) == MatchType.ABBREVIATED

    def test_partial_band(self):
        assert FuzzyMatcher._classify("Jon", "Jan Smith", 72) == MatchType.PARTIAL


class TestHelpers:
    def test_phonetic_match(self):
        assert is_phonetic_match("Stephen", "Stefen")
        assert is_phonetic_match("Meier", "Maier")
        assert is_phonetic_match("Kathy", "Cathy")
        assert not is_phonetic_match("Jon", "Bob")

    def test_abbreviation(self):
        assert is_abbreviation("JS", "Jon Smith")
        assert is_abbreviation("Jon Smith", "js")
        assert is_abbreviation("J S", "Jon Smith")
        assert not is_abbreviation("JS", "Jonsmith")
        assert not is_abbreviation("JX", "Jon Smith")


class TestFindAllMatches:
    def test_sorted_and_unique(self, matcher):
        matches = matcher.find_all_matches("jonathan", "jonathon and jonathan. Jonathan again!")
        texts = [m.matched_text for m in matches]
        scores = [m.similarity_score for m in matches]
        assert len(texts) == len(set(texts))
        assert scores == sorted(scores, reverse=True)
        assert scores[0] == 100
        assert "jonathan" in texts

    def test_sentences_are_fragments(self, matcher):
        matches = matcher.find_all_matches("Jon Smith", "Jon Smith works here. Other line")
        assert "Jon Smith works here" in [m.matched_text for m in matches]

    def test_no_text(self, matcher):
        assert matcher.find_all_matches("jon", "") == []


class TestDocumentSimilarity:
    def test_no_matches_is_zero(self, matcher):
        assert matcher.document_similarity("alexander", "", "", "") == 0

    def test_title_only_exceeds_100(self, matcher):
        # Only contributing fields are averaged, so a lone title match keeps its x3 weight.
        assert matcher.document_similarity("Jon Smith", "Jon Smith profile", "", "") == 300

    def test_title_only_at_90(self, matcher, monkeypatch):
        monkeypatch.setattr(matcher, "best_score", lambda q, t: {"T": 90}.get(t, 0))
        assert matcher.document_similarity("q", "T", "S", "C") == 270

    def test_weighted_average_over_contributing_fields(self, matcher, monkeypatch):
        scores = {"T": 80, "S": 60}
        monkeypatch.setattr(matcher, "best_score", lambda q, t: scores.get(t, 0))
        assert matcher.document_similarity("q", "T", "S", "C") == 180

    def test_all_fields(self, matcher, monkeypatch):
        scores = {"T": 100, "S": 100, "C": 100}
        monkeypatch.setattr(matcher, "best_score", lambda q, t: scores.get(t, 0))
        assert matcher.document_similarity("q", "T", "S", "C") == 200
