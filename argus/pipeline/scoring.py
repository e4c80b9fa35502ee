"""Confidence, relevance and fake-profile heuristics."""

from __future__ import annotations

from datetime import datetime

from argus.pipeline.models import ResultCategory, SearchResult, as_utc, utc_now

TRUSTED_PLATFORMS = ("linkedin.com", "facebook.com", "twitter.com", "github.com")
GENERIC_PROFILE_WORDS = ("profile", "user", "account", "member")
STOCK_PHOTO_KEYWORDS = ("stock", "placeholder", "default", "avatar")

PROFILE_CATEGORIES = (ResultCategory.PROFILE, ResultCategory.SOCIAL)
FAKE_PROFILE_MIN_INDICATORS = 2


def calculate_confidence(result: SearchResult, search_term: str) -> float:
    """Discovery-time confidence. Additive from 0.5, capped at 1.0."""
    term = search_term.lower()
    score = 0.5

    if term and term in result.title.lower():
        score += 0.3
    if term and term in result.snippet.lower():
        score += 0.2

    score += min(len(result.identity_markers) * 0.05, 0.3)

    domain = result.domain.lower()
    if any(platform in domain for platform in TRUSTED_PLATFORMS):
        score += 0.1

    return min(score, 1.0)


def _age_days(found_at: datetime, now: datetime | None) -> float:
    now = as_utc(now) if now is not None else utc_now()
    return (now - as_utc(found_at)).total_seconds() / 86400


def calculate_relevance(result: SearchResult, now: datetime | None = None) -> float:
    """Post-enrichment relevance.

    Terms are summed unclamped and the total is clamped to [0, 1] once.
    """
    score = 0.5
    score += result.confidence_score * 0.3

    if result.fuzzy_match is not None:
        score += result.fuzzy_match.similarity_score / 100 * 0.2

    score += min(len(result.identity_markers) * 0.1, 0.3)

    account = result.account_info
    if account is not None:
        score += 0.15
        if account.email or account.username:
            score += 0.1

    age = _age_days(result.found_at, now)
    if age < 30:
        score += 0.1
    elif age > 365:
        score -= 0.1

    if result.category in PROFILE_CATEGORIES:
        score += 0.1

    return max(0.0, min(score, 1.0))


def fake_profile_indicators(result: SearchResult) -> list[str]:
    indicators: list[str] = []
    if not result.extracted_text or len(result.extracted_text) < 100:
        indicators.append("sparse_content")
    title = result.title.lower()
    if any(word in title for word in GENERIC_PROFILE_WORDS):
        indicators.append("generic_title")
    if len(result.metadata) < 2:
        indicators.append("sparse_metadata")
    if any(
        keyword in link.lower() for link in result.media_links for keyword in STOCK_PHOTO_KEYWORDS
    ):
        indicators.append("stock_media")
    return indicators


def detect_fake_profile(result: SearchResult) -> bool | None:
    """Heuristic fake-profile flag. None for categories it does not apply to."""
    if result.category not in PROFILE_CATEGORIES:
        return None
    return len(fake_profile_indicators(result)) >= FAKE_PROFILE_MIN_INDICATORS
