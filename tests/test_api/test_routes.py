"""Tests for the FastAPI REST API endpoints."""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from argus.ai_engine.engine import NullAgent
from argus.api.app import VERSION, create_app
from argus.api.routes import get_scanner
from argus.config.settings import APIConfig
from argus.fetch.layer import PageFetcher
from argus.pipeline.models import SearchResult
from argus.scanner.engine import Scanner

PROFILE_HTML = """
<html><head><title>Jon Smith (@jonsmith) / X</title>
<meta property="og:title" content="Jon Smith">
</head><body>Jon Smith posts about trains.</body></html>
"""


class _WebOnlyAggregator:
    async def search_web(self, term):
        if term != "Jon Smith":
            return []
        return [
            SearchResult(
                url="https://blog.example.org/jon",
                domain="blog.example.org",
                title="Jon Smith",
                snippet="Jon Smith writes here",
            )
        ]

    async def search_secondary_web(self, term):
        return []

    async def search_tertiary_web(self, term):
        return []

    async def search_social(self, term):
        return []

    async def search_forums(self, term):
        return []

    async def search_archives(self, term):
        return []


def _test_scanner() -> Scanner:
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, text=PROFILE_HTML))
    )
    return Scanner(
        fetcher=PageFetcher(client=client),
        aggregator=_WebOnlyAggregator(),
        agent=NullAgent(),
    )


@pytest.fixture
def app():
    app = create_app(APIConfig(api_token=""))
    app.dependency_overrides[get_scanner] = _test_scanner
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


class TestHealthEndpoint:
    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "argus"
        assert data["version"] == VERSION


class TestScanEndpoint:
    def test_keyword_scan_returns_case(self, client):
        response = client.post("/api/v1/scans", json={"query": "Jon Smith", "name": "Jon"})
        assert response.status_code == 200
        case = response.json()
        assert case["name"] == "Jon"
        assert case["query"] == "Jon Smith"
        assert case["statistics"]["total_results"] == 1
        result = case["results"][0]
        assert result["url"] == "https://blog.example.org/jon"
        assert result["fuzzy_match"]["match_type"] == "Exact"
        assert "html_content" not in result

    def test_url_scan(self, client):
        response = client.post("/api/v1/scans", json={"query": "https://x.com/jonsmith"})
        assert response.status_code == 200
        result = response.json()["results"][0]
        assert result["category"] == "Social"
        assert result["access_status"] == "Free"
        assert result["account_info"]["username"] == "@jonsmith"

    def test_scan_with_filter(self, client):
        response = client.post(
            "/api/v1/scans",
            json={"query": "Jon Smith", "filter": {"included_categories": ["Social"]}},
        )
        assert response.status_code == 200
        assert response.json()["results"] == []

    def test_scan_with_utc_date_filter(self, client):
        window = {"from_date": "2000-01-01T00:00:00Z", "to_date": "2001-01-01T00:00:00Z"}
        response = client.post("/api/v1/scans", json={"query": "Jon Smith", "filter": window})
        assert response.status_code == 200
        assert response.json()["results"] == []

        since = {"from_date": "2000-01-01T00:00:00+02:00", "hide_duplicates": True}
        response = client.post("/api/v1/scans", json={"query": "Jon Smith", "filter": since})
        assert len(response.json()["results"]) == 1

    def test_empty_query_rejected(self, client):
        response = client.post("/api/v1/scans", json={"query": ""})
        assert response.status_code == 422

    def test_blank_query_rejected(self, client):
        response = client.post("/api/v1/scans", json={"query": "   "})
        assert response.status_code == 400


class TestEnrichEndpoint:
    def test_enrich_results(self, client):
        payload = {
            "query": "Jon Smith",
            "results": [
                {
                    "url": "https://blog.example.org/jon",
                    "domain": "blog.example.org",
                    "title": "About Jon Smith",
                    "extracted_text": "Jon Smith lives in Berlin. He builds things.",
                }
            ],
        }
        response = client.post("/api/v1/enrich", json=payload)
        assert response.status_code == 200
        [result] = response.json()
        assert result["fuzzy_match"]["similarity_score"] == 100
        assert result["ai_summary"] == "Jon Smith lives in Berlin. He builds things."
        assert "Berlin" in result["ai_extracted_entities"]
        assert result["relevance_score"] is not None

    def test_enrich_empty_list(self, client):
        response = client.post("/api/v1/enrich", json={"query": "Jon Smith"})
        assert response.status_code == 200
        assert response.json() == []


class TestVariationsEndpoint:
    def test_variations(self, client):
        response = client.post("/api/v1/variations", json={"name": "Jon Smith"})
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Jon Smith"
        assert data["variations"][:3] == ["Jon Smith", "jon smith", "JON SMITH"]

    def test_variations_limit(self, client):
        response = client.post("/api/v1/variations", json={"name": "Jon Smith", "limit": 2})
        assert response.json()["variations"] == ["Jon Smith", "jon smith"]

    def test_invalid_limit(self, client):
        response = client.post("/api/v1/variations", json={"name": "Jon Smith", "limit": 0})
        assert response.status_code == 422


class TestKeywordsEndpoint:
    def test_keywords_ranked(self, client):
        text = "Smith lives in Berlin. Smith likes Berlin trains. Smith again."
        response = client.post("/api/v1/keywords", json={"text": text, "top_n": 2})
        assert response.status_code == 200
        assert response.json() == {"keywords": ["smith", "berlin"]}

    def test_top_n_bounds(self, client):
        response = client.post("/api/v1/keywords", json={"text": "words", "top_n": 0})
        assert response.status_code == 422
