"""Signal emitter for a single scan.

Signals live in memory only; subscribers decide whether to stream or store them.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable

from argus.signals.types import Signal, SignalType
from argus.telemetry.errors import ErrorCode, emit_structured_error

logger = logging.getLogger(__name__)


class SignalEmitter:
    """Emits and broadcasts signals for one scan.

    Signals are:
    - Immutable once emitted
    - Assigned monotonic sequence numbers
    - Delivered to every subscriber, sync or async
    """

    def __init__(self, scan_id: str) -> None:
        self._scan_id = scan_id
        self._sequence = 0
        self._subscribers: list[Callable[[Signal], Any]] = []
        self._signals: list[Signal] = []
        self._lock = asyncio.Lock()

    @property
    def scan_id(self) -> str:
        return self._scan_id

    @property
    def signals(self) -> list[Signal]:
        """Return all emitted signals (read-only copy)."""
        return list(self._signals)

    def of_type(self, signal_type: SignalType) -> list[Signal]:
        return [s for s in self._signals if s.signal_type == signal_type]

    def subscribe(self, callback: Callable[[Signal], Any]) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[Signal], Any]) -> None:
        self._subscribers = [s for s in self._subscribers if s is not callback]

    async def emit(self, signal_type: SignalType, payload: dict[str, Any] | None = None) -> Signal:
        """Emit a signal. This is the only way signals are created."""
        async with self._lock:
            self._sequence += 1
            signal = Signal(
                sequence=self._sequence,
                signal_type=signal_type,
                timestamp=datetime.now(timezone.utc),
                scan_id=self._scan_id,
                payload=payload or {},
            )
            self._signals.append(signal)

        await self._broadcast(signal)
        return signal

    async def _broadcast(self, signal: Signal) -> None:
        for subscriber in self._subscribers:
            try:
                result = subscriber(signal)
                if asyncio.iscoroutine(result):
                    await result
            except Exception as exc:
                emit_structured_error(
                    logger,
                    code=ErrorCode.SIGNAL_SUBSCRIBER_FAILURE,
                    message=str(exc),
                    suppressed=True,
                    scan_id=self._scan_id,
                    details={"signal_type": signal.signal_type.value},
                )

    async def emit_phase_transition(
        self, from_phase: str, to_phase: str, context: dict[str, Any] | None = None
    ) -> Signal:
        """Convenience: emit a PHASE_TRANSITION signal."""
        return await self.emit(
            SignalType.PHASE_TRANSITION,
            {"from_phase": from_phase, "to_phase": to_phase, **(context or {})},
        )

    async def emit_scan_complete(
        self, total_results: int, duplicates: int, duration_s: float, agent_available: bool
    ) -> Signal:
        """Convenience: emit a SCAN_COMPLETE signal."""
        return await self.emit(
            SignalType.SCAN_COMPLETE,
            {
                "total_results": total_results,
                "duplicates": duplicates,
                "duration_s": round(duration_s, 3),
                "agent_available": agent_available,
            },
        )
