"""Per-result enrichment.

Each result is enriched on a working copy by a single task; the copy is
written back only when every step succeeds, so a failing result comes back
exactly as it went in.
"""

from __future__ import annotations

import asyncio
import logging

from argus.ai_engine.engine import EnrichmentAgent, NullAgent
from argus.extraction.accounts import AccountExtractor
from argus.matching.fuzzy import FuzzyMatcher
from argus.pipeline.classification import categorize, extract_entities, fallback_summary
from argus.pipeline.models import SearchResult
from argus.pipeline.scoring import PROFILE_CATEGORIES, calculate_relevance, detect_fake_profile
from argus.signals.emitter import SignalEmitter
from argus.signals.types import SignalType
from argus.telemetry.errors import ErrorCode, emit_structured_error

logger = logging.getLogger(__name__)


def _join(*parts: str | None) -> str:
    return " ".join(p for p in parts if p)


class Enricher:
    """Runs fuzzy matching, account extraction, agent calls and scoring per result."""

    def __init__(
        self,
        agent: EnrichmentAgent | None = None,
        accounts: AccountExtractor | None = None,
        max_concurrent: int = 8,
    ) -> None:
        self._agent = agent or NullAgent()
        self._accounts = accounts or AccountExtractor()
        self._max_concurrent = max_concurrent

    async def enrich_all(
        self,
        results: list[SearchResult],
        query: str,
        matcher: FuzzyMatcher,
        signals: SignalEmitter | None = None,
    ) -> list[SearchResult]:
        """Enrich ``results`` in place, at most ``max_concurrent`` at a time."""
        semaphore = asyncio.Semaphore(self._max_concurrent)

        async def _bounded(result: SearchResult) -> None:
            async with semaphore:
                await self.enrich(result, query, matcher, signals)

        await asyncio.gather(*(_bounded(r) for r in results))
        return results

    async def enrich(
        self,
        result: SearchResult,
        query: str,
        matcher: FuzzyMatcher,
        signals: SignalEmitter | None = None,
    ) -> SearchResult:
        try:
            working = result.model_copy(deep=True)
            await self._enrich_working_copy(working, query, matcher)
        except Exception as exc:
            emit_structured_error(
                logger,
                code=ErrorCode.ENRICHMENT_FAILED,
                message=str(exc),
                suppressed=True,
                scan_id=signals.scan_id if signals else None,
                phase="ENRICH",
                details={"result_id": result.id, "url": result.url},
            )
            if signals:
                await signals.emit(
                    SignalType.ENRICHMENT_FAILED,
                    {"result_id": result.id, "error": str(exc)},
                )
            return result

        for name in type(result).model_fields:
            setattr(result, name, getattr(working, name))

        if signals:
            await signals.emit(
                SignalType.RESULT_ENRICHED,
                {
                    "result_id": result.id,
                    "relevance_score": result.relevance_score,
                    "has_account": result.account_info is not None,
                },
            )
        return result

    async def _enrich_working_copy(
        self, result: SearchResult, query: str, matcher: FuzzyMatcher
    ) -> None:
        agent = self._agent
        combined = _join(result.title, result.snippet, result.extracted_text)

        match = matcher.match(query, combined)
        if match is not None:
            result.fuzzy_match = match

        if result.html_content and result.account_info is None:
            account = self._accounts.extract(result.html_content, result.url)
            if account is None and agent.is_available:
                account = await agent.extract_account_data(result.html_content, result.url)
            if account is not None:
                result.account_info = account

        if result.account_info is not None and agent.is_available:
            assessment = await agent.detect_identity_misuse(query, result.account_info, combined)
            result.account_info.is_potential_misuse = assessment.is_misuse
            result.account_info.misuse_reason = assessment.reason or None

        if result.extracted_text:
            summary = ""
            if agent.is_available:
                summary = await agent.analyze_content_context(
                    result.title, result.snippet, result.extracted_text
                )
            result.ai_summary = summary or fallback_summary(result.extracted_text)

        result.ai_extracted_entities = extract_entities(combined)
        result.category_prediction = categorize(
            result.url, result.title, result.extracted_text or ""
        )
        result.relevance_score = calculate_relevance(result)

        if result.category in PROFILE_CATEGORIES:
            result.is_fake_profile = detect_fake_profile(result)
