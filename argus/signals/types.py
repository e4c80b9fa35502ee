"""Signal type definitions for scan observability."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class SignalType(str, Enum):
    """All signal types emitted during a scan."""

    PHASE_TRANSITION = "PHASE_TRANSITION"
    VARIATIONS_GENERATED = "VARIATIONS_GENERATED"
    SOURCE_QUERIED = "SOURCE_QUERIED"
    SOURCE_FAILED = "SOURCE_FAILED"
    FETCH_COMPLETE = "FETCH_COMPLETE"
    FETCH_FAILED = "FETCH_FAILED"
    DUPLICATES_MARKED = "DUPLICATES_MARKED"
    RESULT_ENRICHED = "RESULT_ENRICHED"
    ENRICHMENT_FAILED = "ENRICHMENT_FAILED"
    SCAN_COMPLETE = "SCAN_COMPLETE"


class Signal(BaseModel):
    """An immutable event emitted during a scan.

    Signals are append-only and cannot be modified after emission.
    """

    sequence: int = Field(description="Monotonic sequence number within the scan")
    signal_type: SignalType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    scan_id: str
    payload: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}
