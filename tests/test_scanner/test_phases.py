"""Tests for scan phase definitions and guarded transitions."""

import pytest

from argus.scanner.engine import InvalidTransitionError, ScannerError, ScanRun
from argus.scanner.phases import TERMINAL_PHASES, VALID_TRANSITIONS, Phase
from argus.signals.types import SignalType


class TestPhases:
    def test_all_phases_have_transitions(self):
        for phase in Phase:
            assert phase in VALID_TRANSITIONS

    def test_terminal_phases(self):
        assert Phase.COMPLETE in TERMINAL_PHASES
        assert Phase.FAIL in TERMINAL_PHASES
        for phase in TERMINAL_PHASES:
            assert VALID_TRANSITIONS[phase] == set()

    def test_every_non_terminal_can_fail(self):
        for phase in Phase:
            if phase not in TERMINAL_PHASES:
                assert Phase.FAIL in VALID_TRANSITIONS[phase]

    def test_both_branches_leave_init(self):
        assert Phase.FETCH in VALID_TRANSITIONS[Phase.INIT]
        assert Phase.AGGREGATE in VALID_TRANSITIONS[Phase.INIT]

    def test_branches_converge_on_deduplicate(self):
        assert VALID_TRANSITIONS[Phase.FETCH] == {Phase.DEDUPLICATE, Phase.FAIL}
        assert VALID_TRANSITIONS[Phase.AGGREGATE] == {Phase.DEDUPLICATE, Phase.FAIL}


class TestScanRun:
    def test_scan_id_format(self):
        run = ScanRun()
        assert run.scan_id.startswith("scan_")
        assert len(run.scan_id) == len("scan_") + 12
        assert run.phase == Phase.INIT

    @pytest.mark.asyncio
    async def test_valid_transition_emits_signal(self):
        run = ScanRun("scan_fixed")
        await run.transition(Phase.AGGREGATE, {"query": "jon"})
        assert run.phase == Phase.AGGREGATE
        signals = run.signals.of_type(SignalType.PHASE_TRANSITION)
        assert signals[0].payload == {"from_phase": "INIT", "to_phase": "AGGREGATE", "query": "jon"}
        assert signals[0].scan_id == "scan_fixed"

    @pytest.mark.asyncio
    async def test_invalid_transition_raises(self):
        run = ScanRun()
        with pytest.raises(InvalidTransitionError):
            await run.transition(Phase.FILTER)
        assert run.phase == Phase.INIT

    @pytest.mark.asyncio
    async def test_no_transition_out_of_terminal(self):
        run = ScanRun()
        await run.transition(Phase.FAIL)
        with pytest.raises(ScannerError):
            await run.transition(Phase.FETCH)
