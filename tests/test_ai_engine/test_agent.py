"""Tests for the optional enrichment agent."""

from __future__ import annotations

import pytest

from argus.ai_engine.engine import (
    EnrichmentAgent,
    MisuseAssessment,
    NullAgent,
    VertexAgent,
    create_agent,
)
from argus.config.settings import VertexConfig
from argus.pipeline.models import AccountData


def _available_agent(monkeypatch, payload=None, error=None):
    agent = VertexAgent(VertexConfig(project_id="test-project", enabled=True))
    agent._client = object()
    agent._initialized = True

    async def fake_generate(prompt, schema=None):
        if error is not None:
            raise error
        return payload

    monkeypatch.setattr(agent, "_generate_json", fake_generate)
    return agent


class TestNullAgent:
    @pytest.mark.asyncio
    async def test_every_call_is_neutral(self):
        agent = NullAgent()
        assert isinstance(agent, EnrichmentAgent)
        assert agent.is_available is False
        assert await agent.extract_account_data("<html/>", "https://a.org") is None
        assessment = await agent.detect_identity_misuse("jon", AccountData(), "")
        assert assessment == MisuseAssessment()
        assert await agent.generate_search_variations("jon") == []
        assert await agent.analyze_content_context("t", "s", "x") == ""


class TestVertexAgentAvailability:
    @pytest.mark.asyncio
    async def test_unavailable_without_project(self):
        agent = VertexAgent(VertexConfig(project_id="", enabled=True))
        assert await agent.initialize() is False
        assert agent.is_available is False

    @pytest.mark.asyncio
    async def test_disabled_by_flag(self):
        agent = VertexAgent(VertexConfig(project_id="p", enabled=False))
        assert await agent.initialize() is False

    @pytest.mark.asyncio
    async def test_create_agent_falls_back_to_null(self):
        agent = await create_agent(VertexConfig(project_id="", enabled=True))
        assert isinstance(agent, NullAgent)

    @pytest.mark.asyncio
    async def test_unavailable_agent_skips_calls(self):
        agent = VertexAgent(VertexConfig(project_id=""))
        assert await agent.generate_search_variations("jon") == []
        assert await agent.extract_account_data("<html/>", "https://a.org") is None


class TestVertexAgentCalls:
    @pytest.mark.asyncio
    async def test_extract_account_data(self, monkeypatch):
        agent = _available_agent(
            monkeypatch, {"username": "jon", "display_name": None, "follower_count": 12}
        )
        account = await agent.extract_account_data("<html/>", "https://a.org/jon")
        assert account.username == "jon"
        assert account.follower_count == 12
        assert account.profile_url == "https://a.org/jon"

    @pytest.mark.asyncio
    async def test_extract_account_data_without_identity(self, monkeypatch):
        agent = _available_agent(monkeypatch, {"bio": "just a bio"})
        assert await agent.extract_account_data("<html/>", "https://a.org") is None

    @pytest.mark.asyncio
    async def test_extract_account_data_non_object(self, monkeypatch):
        agent = _available_agent(monkeypatch, None)
        assert await agent.extract_account_data("<html/>", "https://a.org") is None

    @pytest.mark.asyncio
    async def test_misuse(self, monkeypatch):
        agent = _available_agent(monkeypatch, {"is_misuse": True, "reason": "copied photos"})
        assessment = await agent.detect_identity_misuse("jon", AccountData(username="j"), "")
        assert assessment.is_misuse is True
        assert assessment.reason == "copied photos"

    @pytest.mark.asyncio
    async def test_variations_cleaned(self, monkeypatch):
        agent = _available_agent(monkeypatch, {"variations": [" Johnny ", "", "J. Smith"]})
        assert await agent.generate_search_variations("Jon Smith") == ["Johnny", "J. Smith"]

    @pytest.mark.asyncio
    async def test_call_failure_returns_neutral_value(self, monkeypatch, caplog):
        agent = _available_agent(monkeypatch, error=RuntimeError("quota exceeded"))
        assert await agent.generate_search_variations("jon") == []
        assessment = await agent.detect_identity_misuse("jon", AccountData(), "")
        assert assessment.is_misuse is False
        assert any(r.getMessage() == "argus_error" for r in caplog.records)
