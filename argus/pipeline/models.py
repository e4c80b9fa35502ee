"""Investigation data models: results, account profiles, fuzzy matches and cases."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


def _new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Aware copy of ``value`` in UTC. Naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class AccessStatus(str, Enum):
    """How reachable a result's page was."""

    FREE = "Free"
    REQUIRES_LOGIN = "RequiresLogin"
    PAYWALL = "Paywall"
    BLOCKED = "Blocked"
    ARCHIVED = "Archived"
    DELETED = "Deleted"
    ERROR = "Error"
    UNKNOWN = "Unknown"


class ResultCategory(str, Enum):
    WEB = "Web"
    IMAGE = "Image"
    VIDEO = "Video"
    SOCIAL = "Social"
    FORUM = "Forum"
    ARCHIVE = "Archive"
    ADULT = "Adult"
    DOCUMENT = "Document"
    PROFILE = "Profile"
    UNKNOWN = "Unknown"


class MatchType(str, Enum):
    EXACT = "Exact"
    CASE_INSENSITIVE = "CaseInsensitive"
    TYPO_TOLERANT = "TypoTolerant"
    PHONETIC = "Phonetic"
    ABBREVIATED = "Abbreviated"
    PARTIAL = "Partial"


class AccountData(BaseModel):
    """Structured profile fields extracted from a platform page."""

    username: str | None = None
    display_name: str | None = None
    email: str | None = None
    profile_url: str | None = None
    bio: str | None = None
    location: str | None = None
    account_created: datetime | None = None
    last_active: datetime | None = None
    follower_count: int | None = None
    following_count: int | None = None
    avatar_url: str | None = None
    is_verified: bool = False
    custom_fields: dict[str, str] = Field(default_factory=dict)

    # Identity misuse indicators
    is_potential_misuse: bool = False
    misuse_reason: str | None = None


class FuzzyMatchInfo(BaseModel):
    """How a query matched a piece of text. Immutable once attached."""

    original_query: str
    matched_text: str
    similarity_score: int = Field(ge=0, le=100)
    match_type: MatchType
    variations: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class SearchResult(BaseModel):
    """A single candidate document.

    Created once per fetched or aggregated document and enriched in place by
    every pipeline stage. ``is_duplicate`` is owned by the duplicate detector.
    """

    id: str = Field(default_factory=_new_id)
    url: str = ""
    domain: str = ""
    title: str = ""
    snippet: str = ""
    category: ResultCategory = ResultCategory.WEB
    access_status: AccessStatus = AccessStatus.UNKNOWN
    found_at: datetime = Field(default_factory=utc_now)
    last_seen: datetime | None = None
    identity_markers: list[str] = Field(default_factory=list)
    confidence_score: float = Field(default=0.0, ge=0.0, le=1.0)
    extracted_text: str | None = None
    media_links: list[str] = Field(default_factory=list)
    outgoing_links: list[str] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)
    is_duplicate: bool = False
    screenshot_path: str | None = None
    html_content: str | None = Field(default=None, exclude=True, repr=False)

    account_info: AccountData | None = None
    fuzzy_match: FuzzyMatchInfo | None = None

    ai_summary: str | None = None
    ai_extracted_entities: list[str] = Field(default_factory=list)
    relevance_score: float | None = Field(default=None, ge=0.0, le=1.0)
    category_prediction: ResultCategory | None = None
    is_fake_profile: bool | None = None

    model_config = {"validate_assignment": True}


class SearchFilter(BaseModel):
    """Caller-supplied view filter applied after enrichment."""

    hide_adult: bool = False
    hide_duplicates: bool = False
    min_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    included_categories: list[ResultCategory] = Field(default_factory=list)
    included_access_statuses: list[AccessStatus] = Field(default_factory=list)
    included_domains: list[str] = Field(default_factory=list)
    excluded_domains: list[str] = Field(default_factory=list)
    from_date: datetime | None = None
    to_date: datetime | None = None


class SearchCaseMetadata(BaseModel):
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    custom_fields: dict[str, str] = Field(default_factory=dict)
    is_archived: bool = False


class SearchStatistics(BaseModel):
    total_results: int = 0
    unique_results: int = 0
    duplicate_results: int = 0
    category_counts: dict[ResultCategory, int] = Field(default_factory=dict)
    access_status_counts: dict[AccessStatus, int] = Field(default_factory=dict)
    domain_counts: dict[str, int] = Field(default_factory=dict)
    average_confidence: float = 0.0


class SearchCase(BaseModel):
    """A query together with the ordered results it produced."""

    id: str = Field(default_factory=_new_id)
    name: str = ""
    query: str
    created_at: datetime = Field(default_factory=utc_now)
    last_updated: datetime | None = None
    results: list[SearchResult] = Field(default_factory=list)
    metadata: SearchCaseMetadata = Field(default_factory=SearchCaseMetadata)
    statistics: SearchStatistics = Field(default_factory=SearchStatistics)
