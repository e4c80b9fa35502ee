"""Caller-supplied result filtering."""

from __future__ import annotations

from argus.pipeline.models import ResultCategory, SearchFilter, SearchResult, as_utc


def _domain_matches(domain: str, candidates: list[str]) -> bool:
    domain = domain.lower()
    for candidate in candidates:
        candidate = candidate.lower()
        if domain == candidate or domain.endswith("." + candidate):
            return True
    return False


def result_passes(result: SearchResult, search_filter: SearchFilter) -> bool:
    f = search_filter
    if f.hide_adult and result.category == ResultCategory.ADULT:
        return False
    if f.hide_duplicates and result.is_duplicate:
        return False
    if f.min_confidence > 0 and result.confidence_score < f.min_confidence:
        return False
    if f.included_categories and result.category not in f.included_categories:
        return False
    if f.included_access_statuses and result.access_status not in f.included_access_statuses:
        return False
    if f.included_domains and not _domain_matches(result.domain, f.included_domains):
        return False
    if f.excluded_domains and _domain_matches(result.domain, f.excluded_domains):
        return False
    found_at = as_utc(result.found_at)
    if f.from_date is not None and found_at < as_utc(f.from_date):
        return False
    if f.to_date is not None and found_at > as_utc(f.to_date):
        return False
    return True


def apply_filter(
    results: list[SearchResult], search_filter: SearchFilter | None
) -> list[SearchResult]:
    """Return the results that pass ``search_filter``, order preserved."""
    if search_filter is None:
        return list(results)
    return [r for r in results if result_passes(r, search_filter)]
