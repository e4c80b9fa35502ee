"""Argus configuration settings."""

from __future__ import annotations

import os
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


def _env_flag(var_name: str, default: str = "") -> bool:
    return os.getenv(var_name, default).strip().lower() in {"1", "true", "yes", "on"}


class VertexConfig(BaseModel):
    """Vertex AI configuration for the optional enrichment agent."""

    enabled: bool = Field(default_factory=lambda: _env_flag("ARGUS_AGENT_ENABLED", "true"))
    project_id: str = Field(default_factory=lambda: os.getenv("VERTEX_PROJECT_ID", ""))
    location: str = Field(default_factory=lambda: os.getenv("VERTEX_LOCATION", "us-central1"))
    model: str = "gemini-2.5-flash"
    max_markup_chars: int = 20000


class FetchConfig(BaseModel):
    """Page fetch configuration. One GET per URL, no retries."""

    timeout_s: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    follow_redirects: bool = True
    max_in_flight: int = 4

    @field_validator("max_in_flight")
    @classmethod
    def _validate_in_flight(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_in_flight must be >= 1")
        return value


class MatchingConfig(BaseModel):
    """Fuzzy matching thresholds."""

    min_similarity_score: int = 70
    max_variation_queries: int = 5

    @field_validator("min_similarity_score")
    @classmethod
    def _validate_min_score(cls, value: int) -> int:
        if not 0 <= value <= 100:
            raise ValueError("min_similarity_score must be within 0-100")
        return value


class DuplicateConfig(BaseModel):
    """Duplicate detection configuration."""

    threshold: float = Field(default=0.8, ge=0.0, le=1.0)


class ConcurrencyConfig(BaseModel):
    """Bounds on cooperative concurrency inside a scan."""

    max_concurrent_enrichments: int = Field(default=8, ge=1)
    max_concurrent_searches: int = Field(default=6, ge=1)


class ScannerConfig(BaseModel):
    """Root configuration for a Scanner."""

    fetch: FetchConfig = Field(default_factory=FetchConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    duplicates: DuplicateConfig = Field(default_factory=DuplicateConfig)
    concurrency: ConcurrencyConfig = Field(default_factory=ConcurrencyConfig)
    vertex: VertexConfig = Field(default_factory=VertexConfig)
    log_level: str = Field(default_factory=lambda: os.getenv("ARGUS_LOG_LEVEL", "INFO"))


class APIConfig(BaseModel):
    """API security controls from environment."""

    api_token: str = Field(default_factory=lambda: os.getenv("ARGUS_API_TOKEN", ""))
    allowed_origins: list[str] = Field(
        default_factory=lambda: APIConfig.parse_allowed_origins(
            os.getenv("ARGUS_ALLOWED_ORIGINS", "")
        )
    )
    cors_allow_credentials: bool = Field(
        default_factory=lambda: _env_flag("ARGUS_CORS_ALLOW_CREDENTIALS")
    )

    @staticmethod
    def parse_allowed_origins(value: str) -> list[str]:
        if not value.strip():
            return ["http://localhost", "http://127.0.0.1"]
        origins = [origin.strip() for origin in value.split(",") if origin.strip()]
        if "*" in origins:
            raise ValueError("ARGUS_ALLOWED_ORIGINS cannot include '*'")
        return origins

    @field_validator("allowed_origins")
    @classmethod
    def _validate_allowed_origins(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("allowed_origins cannot be empty")
        for origin in value:
            parsed = urlparse(origin)
            if parsed.scheme not in {"http", "https"} or not parsed.netloc:
                raise ValueError(f"Invalid CORS origin: {origin}")
        return value
