"""Tests for duplicate detection."""

from __future__ import annotations

from argus.pipeline.duplicates import (
    find_duplicate_pairs,
    jaccard_similarity,
    mark_duplicates,
    word_set,
)
from argus.pipeline.models import SearchResult


def _result(title, snippet=""):
    return SearchResult(url=f"https://example.com/{title}", title=title, snippet=snippet)


class TestJaccard:
    def test_short_tokens_ignored(self):
        assert word_set("A an the Jon, Smith!") == {"the", "jon", "smith"}

    def test_identical(self):
        assert jaccard_similarity("Jon Smith Berlin", "jon smith berlin") == 1.0

    def test_both_empty(self):
        assert jaccard_similarity("", "a an") == 1.0

    def test_one_empty(self):
        assert jaccard_similarity("", "jon smith") == 0.0

    def test_partial_overlap(self):
        assert jaccard_similarity("jon smith berlin", "jon smith munich") == 2 / 4


class TestMarkDuplicates:
    def test_identical_title_and_snippet_flagged(self):
        results = [
            _result("Jon Smith profile", "Software engineer in Berlin"),
            _result("Jon Smith profile", "Software engineer in Berlin"),
        ]
        assert mark_duplicates(results) == 1
        assert results[0].is_duplicate is False
        assert results[1].is_duplicate is True

    def test_below_threshold_not_flagged(self):
        results = [
            _result("Jon Smith profile", "Software engineer in Berlin"),
            _result("Anna Maier blog", "Gardening tips from Munich"),
        ]
        assert mark_duplicates(results) == 0
        assert not any(r.is_duplicate for r in results)

    def test_later_member_of_each_pair(self):
        results = [
            _result("alpha beta gamma"),
            _result("other words entirely"),
            _result("alpha beta gamma"),
            _result("alpha beta gamma"),
        ]
        assert find_duplicate_pairs(results) == [(0, 2), (0, 3), (2, 3)]
        mark_duplicates(results)
        assert [r.is_duplicate for r in results] == [False, False, True, True]

    def test_custom_threshold(self):
        results = [_result("jon smith berlin"), _result("jon smith munich")]
        assert mark_duplicates(results, threshold=0.5) == 1
        assert results[1].is_duplicate

    def test_empty_list(self):
        assert mark_duplicates([]) == 0
