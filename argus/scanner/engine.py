"""The Scanner: Argus investigation engine and scan lifecycle controller.

A scan is a finite state machine. Input that looks like a URL takes the FETCH
branch (one page, analyzed directly); anything else takes the AGGREGATE branch
(variations fanned out to the search sources). Both branches then run
DEDUPLICATE, ENRICH and, when a filter is given, FILTER.

Responsibilities:
- Select the branch from the query and drive every phase transition
- Fan out source queries and per-result enrichment as bounded async tasks
- Convert fetch, source and enrichment failures into degraded results
- Emit Signals at every phase boundary

MUST NOT:
- Raise network or extraction failures to the caller
- Let one result's failure drop or abort the others
- Block on the enrichment agent when it is unavailable
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from typing import Any, Callable
from urllib.parse import urlparse

from argus.ai_engine.engine import EnrichmentAgent, create_agent
from argus.config.settings import ScannerConfig
from argus.extraction.accounts import AccountExtractor
from argus.extraction.content import ContentExtractor
from argus.fetch.aggregator import SOURCE_NAMES, NullAggregator, SearchAggregator, source_method
from argus.fetch.layer import PageFetcher
from argus.matching.fuzzy import FuzzyMatcher
from argus.pipeline.cases import build_case
from argus.pipeline.classification import categorize
from argus.pipeline.duplicates import mark_duplicates
from argus.pipeline.filters import apply_filter
from argus.pipeline.models import AccessStatus, SearchCase, SearchFilter, SearchResult
from argus.pipeline.scoring import calculate_confidence
from argus.scanner.enrichment import Enricher
from argus.scanner.phases import TERMINAL_PHASES, VALID_TRANSITIONS, Phase
from argus.signals.emitter import SignalEmitter
from argus.signals.types import Signal, SignalType
from argus.telemetry.errors import ErrorCode, emit_structured_error

logger = logging.getLogger(__name__)

URL_PREFIXES = ("http://", "https://", "www.")


class ScannerError(Exception):
    """Raised when the Scanner is driven incorrectly."""


class InvalidTransitionError(ScannerError):
    """Raised on a phase transition not allowed by ``VALID_TRANSITIONS``."""


def is_url_query(query: str) -> bool:
    return query.lower().startswith(URL_PREFIXES)


def normalize_url(query: str) -> str:
    """Scheme-less ``www.`` input is fetched over https."""
    query = query.strip()
    if query.lower().startswith("www."):
        return f"https://{query}"
    return query


def extract_domain(url: str) -> str:
    try:
        return urlparse(url).hostname or "unknown"
    except ValueError:
        return "unknown"


class ScanRun:
    """Phase and signal state of one scan."""

    def __init__(self, scan_id: str | None = None) -> None:
        self._scan_id = scan_id or f"scan_{uuid.uuid4().hex[:12]}"
        self._phase = Phase.INIT
        self._signals = SignalEmitter(self._scan_id)
        self._start_time = time.monotonic()

    @property
    def scan_id(self) -> str:
        return self._scan_id

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def signals(self) -> SignalEmitter:
        return self._signals

    @property
    def elapsed_s(self) -> float:
        return time.monotonic() - self._start_time

    async def transition(self, to_phase: Phase, context: dict[str, Any] | None = None) -> None:
        """Transition to a new phase with guard validation and signal emission.

        Every phase transition MUST go through this method.
        """
        if to_phase not in VALID_TRANSITIONS.get(self._phase, set()):
            raise InvalidTransitionError(
                f"Invalid transition: {self._phase.value} -> {to_phase.value}"
            )

        from_phase = self._phase
        self._phase = to_phase

        await self._signals.emit_phase_transition(
            from_phase=from_phase.value,
            to_phase=to_phase.value,
            context=context or {},
        )


class Scanner:
    """Top-level investigation facade.

    Collaborators are injectable; the defaults fetch over httpx, query no
    search backends, and probe the Vertex agent on first use.
    """

    def __init__(
        self,
        config: ScannerConfig | None = None,
        fetcher: PageFetcher | None = None,
        aggregator: SearchAggregator | None = None,
        agent: EnrichmentAgent | None = None,
        accounts: AccountExtractor | None = None,
        content: ContentExtractor | None = None,
    ) -> None:
        self._config = config or ScannerConfig()
        self._fetcher = fetcher or PageFetcher(self._config.fetch)
        self._aggregator = aggregator or NullAggregator()
        self._agent = agent
        self._agent_lock = asyncio.Lock()
        self._accounts = accounts or AccountExtractor()
        self._content = content or ContentExtractor()
        self._subscribers: list[Callable[[Signal], Any]] = []
        self._last_run: ScanRun | None = None

    @property
    def config(self) -> ScannerConfig:
        return self._config

    @property
    def last_run(self) -> ScanRun | None:
        return self._last_run

    def subscribe(self, callback: Callable[[Signal], Any]) -> None:
        """Receive the signals of every subsequent scan."""
        self._subscribers.append(callback)

    async def get_agent(self) -> EnrichmentAgent:
        """The enrichment agent, probed once and cached for the Scanner's lifetime."""
        if self._agent is None:
            async with self._agent_lock:
                if self._agent is None:
                    self._agent = await create_agent(self._config.vertex)
        return self._agent

    def _new_run(self) -> ScanRun:
        run = ScanRun()
        for callback in self._subscribers:
            run.signals.subscribe(callback)
        self._last_run = run
        return run

    def _new_matcher(self) -> FuzzyMatcher:
        return FuzzyMatcher(self._config.matching.min_similarity_score)

    def _enricher(self, agent: EnrichmentAgent) -> Enricher:
        return Enricher(
            agent=agent,
            accounts=self._accounts,
            max_concurrent=self._config.concurrency.max_concurrent_enrichments,
        )

    # --- Public API ---

    async def scan(
        self, query: str, search_filter: SearchFilter | None = None
    ) -> list[SearchResult]:
        """Run a scan and return its (optionally filtered) results in order.

        Only a blank query raises; every other failure degrades the results.
        """
        if not query or not query.strip():
            raise ValueError("query must not be empty")
        query = query.strip()

        run = self._new_run()
        agent = await self.get_agent()
        matcher = self._new_matcher()
        results: list[SearchResult] = []

        try:
            if is_url_query(query):
                url = normalize_url(query)
                await run.transition(Phase.FETCH, {"url": url})
                results = [await self._analyze_url(run, url)]
            else:
                await run.transition(Phase.AGGREGATE, {"query": query})
                results = await self._search_keyword(run, query, matcher, agent)

            await run.transition(Phase.DEDUPLICATE, {"results": len(results)})
            flagged = mark_duplicates(results, self._config.duplicates.threshold)
            await run.signals.emit(SignalType.DUPLICATES_MARKED, {"duplicates": flagged})

            await run.transition(Phase.ENRICH)
            await self._enricher(agent).enrich_all(results, query, matcher, run.signals)

            if search_filter is not None:
                await run.transition(Phase.FILTER)
                results = apply_filter(results, search_filter)

            await run.transition(Phase.COMPLETE)
        except InvalidTransitionError:
            raise
        except Exception as exc:
            emit_structured_error(
                logger,
                code=ErrorCode.SCAN_FAILED,
                message=str(exc),
                suppressed=True,
                scan_id=run.scan_id,
                phase=run.phase.value,
            )
            if run.phase not in TERMINAL_PHASES:
                await run.transition(Phase.FAIL, {"error": str(exc)})

        await run.signals.emit_scan_complete(
            total_results=len(results),
            duplicates=sum(1 for r in results if r.is_duplicate),
            duration_s=run.elapsed_s,
            agent_available=agent.is_available,
        )
        logger.info(
            "Scan finished",
            extra={"scan_id": run.scan_id, "phase": run.phase.value, "results": len(results)},
        )
        return results

    async def scan_case(
        self,
        query: str,
        search_filter: SearchFilter | None = None,
        name: str | None = None,
    ) -> SearchCase:
        results = await self.scan(query, search_filter)
        return build_case(query.strip(), results, name=name)

    async def enrich_results(
        self,
        results: list[SearchResult],
        original_query: str,
        variations: list[str] | None = None,
    ) -> list[SearchResult]:
        """Enrich an existing result list in place, outside of a scan."""
        run = self._new_run()
        agent = await self.get_agent()
        matcher = self._new_matcher()
        if variations:
            matcher.remember(variations)

        await run.transition(Phase.ENRICH, {"results": len(results)})
        await self._enricher(agent).enrich_all(results, original_query, matcher, run.signals)
        await run.transition(Phase.COMPLETE)
        return results

    async def aclose(self) -> None:
        await self._fetcher.aclose()

    # --- URL branch ---

    async def _analyze_url(self, run: ScanRun, url: str) -> SearchResult:
        result = SearchResult(url=url, domain=extract_domain(url))

        try:
            fetched = await self._fetcher.fetch(url)
            if not fetched.ok:
                result.access_status = AccessStatus.ERROR
                result.snippet = f"Error: {fetched.detail}"
                emit_structured_error(
                    logger,
                    code=ErrorCode.FETCH_FAILED,
                    message=fetched.detail,
                    suppressed=True,
                    scan_id=run.scan_id,
                    phase=run.phase.value,
                    details={"url": url, "status_code": fetched.status_code},
                )
                await run.signals.emit(
                    SignalType.FETCH_FAILED,
                    {"url": url, "status": fetched.status.value, "detail": fetched.detail},
                )
                return result

            content = self._content.extract(fetched.html, url)
            result.access_status = AccessStatus.FREE
            result.html_content = fetched.html
            result.title = content.title
            result.extracted_text = content.text
            result.media_links = content.media_links
            result.outgoing_links = content.outgoing_links
            result.metadata = content.metadata
            result.category = categorize(url, content.title, content.text)
            result.confidence_score = 1.0

            await run.signals.emit(
                SignalType.FETCH_COMPLETE,
                {"url": url, "status_code": fetched.status_code, "hash": fetched.content_hash},
            )
        except Exception as exc:
            emit_structured_error(
                logger,
                code=ErrorCode.FETCH_FAILED,
                message=str(exc),
                suppressed=True,
                scan_id=run.scan_id,
                phase=run.phase.value,
                details={"url": url},
            )
            result.access_status = AccessStatus.ERROR
            result.snippet = f"Error: {exc}"

        return result

    # --- Keyword branch ---

    async def _search_keyword(
        self,
        run: ScanRun,
        keyword: str,
        matcher: FuzzyMatcher,
        agent: EnrichmentAgent,
    ) -> list[SearchResult]:
        variations = matcher.generate_variations(keyword)
        if agent.is_available:
            extra = await agent.generate_search_variations(keyword)
            matcher.remember(extra)
            variations = matcher.variations
        await run.signals.emit(
            SignalType.VARIATIONS_GENERATED,
            {"count": len(variations), "sample": variations[:10]},
        )

        semaphore = asyncio.Semaphore(self._config.concurrency.max_concurrent_searches)

        async def _query(source: str, term: str) -> list[SearchResult]:
            async with semaphore:
                return await self._query_source(run, source, term)

        batches = await asyncio.gather(*(_query(source, keyword) for source in SOURCE_NAMES))

        limit = self._config.matching.max_variation_queries
        keyword_folded = keyword.lower()
        variant_terms = [v for v in variations if v.lower() != keyword_folded][:limit]
        batches += await asyncio.gather(*(_query("web", term) for term in variant_terms))

        results = [result for batch in batches for result in batch]
        for result in results:
            result.confidence_score = calculate_confidence(result, keyword)

        logger.info(
            "Aggregated results",
            extra={"scan_id": run.scan_id, "results": len(results), "variants": len(variant_terms)},
        )
        return results

    async def _query_source(self, run: ScanRun, source: str, term: str) -> list[SearchResult]:
        try:
            found = await source_method(self._aggregator, source)(term)
        except Exception as exc:
            emit_structured_error(
                logger,
                code=ErrorCode.AGGREGATOR_FAILED,
                message=str(exc),
                suppressed=True,
                scan_id=run.scan_id,
                phase=run.phase.value,
                details={"source": source, "term": term},
            )
            await run.signals.emit(
                SignalType.SOURCE_FAILED, {"source": source, "term": term, "error": str(exc)}
            )
            return []

        found = list(found or [])
        await run.signals.emit(
            SignalType.SOURCE_QUERIED, {"source": source, "term": term, "results": len(found)}
        )
        return found
