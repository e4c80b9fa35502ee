"""Search case assembly and statistics."""

from __future__ import annotations

from collections import Counter

from argus.pipeline.models import SearchCase, SearchResult, SearchStatistics, utc_now


def compute_statistics(results: list[SearchResult]) -> SearchStatistics:
    total = len(results)
    duplicates = sum(1 for r in results if r.is_duplicate)
    average = sum(r.confidence_score for r in results) / total if total else 0.0
    return SearchStatistics(
        total_results=total,
        unique_results=total - duplicates,
        duplicate_results=duplicates,
        category_counts=dict(Counter(r.category for r in results)),
        access_status_counts=dict(Counter(r.access_status for r in results)),
        domain_counts=dict(Counter(r.domain for r in results if r.domain)),
        average_confidence=round(average, 4),
    )


def build_case(query: str, results: list[SearchResult], name: str | None = None) -> SearchCase:
    """Wrap scan results in a case with computed statistics."""
    return SearchCase(
        name=name or query,
        query=query,
        last_updated=utc_now(),
        results=results,
        statistics=compute_statistics(results),
    )
