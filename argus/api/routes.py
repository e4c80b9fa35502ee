"""REST API routes for Argus.

Provides endpoints for:
- Running a scan and receiving the resulting case
- Enriching an existing result list
- Generating search variations for a name
- Ranking the keywords of a text
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from argus.api.auth import require_api_auth
from argus.matching.variations import generate_variations
from argus.pipeline.classification import top_keywords
from argus.pipeline.models import SearchCase, SearchFilter, SearchResult
from argus.scanner.engine import Scanner

router = APIRouter()

_scanner: Scanner | None = None


def get_scanner() -> Scanner:
    """Process-wide Scanner. Override this dependency to inject another one."""
    global _scanner
    if _scanner is None:
        _scanner = Scanner()
    return _scanner


# --- Request/Response Models ---


class ScanRequest(BaseModel):
    """Request to run a scan for a name, keyword or URL."""

    query: str = Field(min_length=1)
    filter: SearchFilter | None = None
    name: str | None = None


class EnrichRequest(BaseModel):
    """Request to enrich previously collected results."""

    query: str = Field(min_length=1)
    results: list[SearchResult] = Field(default_factory=list)
    variations: list[str] = Field(default_factory=list)


class VariationsRequest(BaseModel):
    name: str = Field(min_length=1)
    limit: int | None = Field(default=None, ge=1)


class VariationsResponse(BaseModel):
    name: str
    variations: list[str]


class KeywordsRequest(BaseModel):
    text: str
    top_n: int = Field(default=10, ge=1, le=100)


class KeywordsResponse(BaseModel):
    keywords: list[str]


# --- Endpoints ---


@router.post("/scans", response_model=SearchCase)
async def create_scan(
    request: ScanRequest,
    _: str = Depends(require_api_auth),
    scanner: Scanner = Depends(get_scanner),
) -> SearchCase:
    """Run a scan to completion and return it as a case with statistics."""
    if not request.query.strip():
        raise HTTPException(status_code=400, detail="query must not be blank")
    return await scanner.scan_case(request.query, request.filter, name=request.name)


@router.post("/enrich", response_model=list[SearchResult])
async def enrich_results(
    request: EnrichRequest,
    _: str = Depends(require_api_auth),
    scanner: Scanner = Depends(get_scanner),
) -> list[SearchResult]:
    return await scanner.enrich_results(
        request.results, request.query, variations=request.variations or None
    )


@router.post("/variations", response_model=VariationsResponse)
async def create_variations(
    request: VariationsRequest, _: str = Depends(require_api_auth)
) -> VariationsResponse:
    variations = generate_variations(request.name)
    if request.limit is not None:
        variations = variations[: request.limit]
    return VariationsResponse(name=request.name, variations=variations)


@router.post("/keywords", response_model=KeywordsResponse)
async def rank_keywords(
    request: KeywordsRequest, _: str = Depends(require_api_auth)
) -> KeywordsResponse:
    return KeywordsResponse(keywords=top_keywords(request.text, request.top_n))
