"""Search source aggregators.

Each source is queried with a term and returns candidate results. The scanner
treats every source as opaque and tolerates an empty list from any of them.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Protocol, runtime_checkable

from argus.pipeline.models import SearchResult

logger = logging.getLogger(__name__)

SOURCE_NAMES = (
    "web",
    "secondary_web",
    "tertiary_web",
    "social",
    "forums",
    "archives",
)


@runtime_checkable
class SearchAggregator(Protocol):
    async def search_web(self, term: str) -> list[SearchResult]: ...

    async def search_secondary_web(self, term: str) -> list[SearchResult]: ...

    async def search_tertiary_web(self, term: str) -> list[SearchResult]: ...

    async def search_social(self, term: str) -> list[SearchResult]: ...

    async def search_forums(self, term: str) -> list[SearchResult]: ...

    async def search_archives(self, term: str) -> list[SearchResult]: ...


def source_method(
    aggregator: SearchAggregator, source: str
) -> Callable[[str], Awaitable[list[SearchResult]]]:
    """Bound ``search_<source>`` method for a name in ``SOURCE_NAMES``."""
    return getattr(aggregator, f"search_{source}")


class NullAggregator:
    """Aggregator with no search backends configured. Every source returns nothing."""

    async def _empty(self, source: str, term: str) -> list[SearchResult]:
        logger.debug("No backend configured for source", extra={"source": source, "term": term})
        return []

    async def search_web(self, term: str) -> list[SearchResult]:
        return await self._empty("web", term)

    async def search_secondary_web(self, term: str) -> list[SearchResult]:
        return await self._empty("secondary_web", term)

    async def search_tertiary_web(self, term: str) -> list[SearchResult]:
        return await self._empty("tertiary_web", term)

    async def search_social(self, term: str) -> list[SearchResult]:
        return await self._empty("social", term)

    async def search_forums(self, term: str) -> list[SearchResult]:
        return await self._empty("forums", term)

    async def search_archives(self, term: str) -> list[SearchResult]:
        return await self._empty("archives", term)
