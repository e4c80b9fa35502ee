"""Structured error telemetry helpers."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ErrorCode(str, Enum):
    """Canonical codes for failures that are recovered and logged, never raised."""

    FETCH_FAILED = "FETCH_FAILED"
    AGGREGATOR_FAILED = "AGGREGATOR_FAILED"
    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    ENRICHMENT_FAILED = "ENRICHMENT_FAILED"
    AGENT_INITIALIZATION_FAILED = "AGENT_INITIALIZATION_FAILED"
    AGENT_CALL_FAILED = "AGENT_CALL_FAILED"
    SIGNAL_SUBSCRIBER_FAILURE = "SIGNAL_SUBSCRIBER_FAILURE"
    SCAN_FAILED = "SCAN_FAILED"


def emit_structured_error(
    logger: logging.Logger,
    *,
    code: ErrorCode,
    message: str,
    suppressed: bool,
    scan_id: str | None = None,
    phase: str | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    """Emit a structured telemetry event via logging."""
    logger.error(
        "argus_error",
        extra={
            "error_code": code,
            "error_message": message,
            "suppressed": suppressed,
            "scan_id": scan_id,
            "phase": phase,
            "details": details or {},
        },
    )


def configure_logging(level: str = "INFO") -> None:
    """Install a root handler once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=_LOG_FORMAT)
    root.setLevel(level.upper())
