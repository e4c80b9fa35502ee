"""Tests for settings validation."""

import pytest

from argus.config.settings import (
    APIConfig,
    ConcurrencyConfig,
    DuplicateConfig,
    FetchConfig,
    MatchingConfig,
    ScannerConfig,
    VertexConfig,
)


def test_api_config_default_origins(monkeypatch):
    monkeypatch.delenv("ARGUS_ALLOWED_ORIGINS", raising=False)
    cfg = APIConfig()
    assert cfg.allowed_origins == ["http://localhost", "http://127.0.0.1"]


def test_api_config_origins_from_env(monkeypatch):
    monkeypatch.setenv("ARGUS_ALLOWED_ORIGINS", "https://a.example.org, https://b.example.org")
    assert APIConfig().allowed_origins == ["https://a.example.org", "https://b.example.org"]


def test_api_config_rejects_wildcard_in_env():
    with pytest.raises(ValueError):
        APIConfig.parse_allowed_origins("https://a.example.org,*")


def test_api_config_rejects_wildcard_origin():
    with pytest.raises(ValueError):
        APIConfig(allowed_origins=["*"])


def test_api_config_rejects_invalid_origin_url():
    with pytest.raises(ValueError):
        APIConfig(allowed_origins=["localhost:3000"])


def test_api_config_rejects_empty_origins():
    with pytest.raises(ValueError):
        APIConfig(allowed_origins=[])


def test_scanner_defaults():
    cfg = ScannerConfig()
    assert cfg.fetch.timeout_s == 30.0
    assert cfg.matching.min_similarity_score == 70
    assert cfg.matching.max_variation_queries == 5
    assert cfg.duplicates.threshold == 0.8


@pytest.mark.parametrize("score", [-1, 101])
def test_matching_rejects_out_of_range_score(score):
    with pytest.raises(ValueError):
        MatchingConfig(min_similarity_score=score)


def test_duplicate_threshold_bounds():
    with pytest.raises(ValueError):
        DuplicateConfig(threshold=1.5)


def test_fetch_rejects_zero_in_flight():
    with pytest.raises(ValueError):
        FetchConfig(max_in_flight=0)


def test_concurrency_rejects_zero():
    with pytest.raises(ValueError):
        ConcurrencyConfig(max_concurrent_searches=0)


def test_vertex_config_from_env(monkeypatch):
    monkeypatch.setenv("VERTEX_PROJECT_ID", "my-project")
    monkeypatch.setenv("ARGUS_AGENT_ENABLED", "false")
    cfg = VertexConfig()
    assert cfg.project_id == "my-project"
    assert cfg.enabled is False
