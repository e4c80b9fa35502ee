"""Scan phase definitions: the finite state machine states and transitions."""

from __future__ import annotations

from enum import Enum


class Phase(str, Enum):
    """All valid scan phases. A scan enters exactly one of FETCH (URL input)
    or AGGREGATE (keyword input) after INIT."""

    INIT = "INIT"
    FETCH = "FETCH"
    AGGREGATE = "AGGREGATE"
    DEDUPLICATE = "DEDUPLICATE"
    ENRICH = "ENRICH"
    FILTER = "FILTER"
    COMPLETE = "COMPLETE"
    FAIL = "FAIL"


# Valid phase transitions. Each key maps to a set of phases it can transition to.
VALID_TRANSITIONS: dict[Phase, set[Phase]] = {
    Phase.INIT: {Phase.FETCH, Phase.AGGREGATE, Phase.ENRICH, Phase.FAIL},
    Phase.FETCH: {Phase.DEDUPLICATE, Phase.FAIL},
    Phase.AGGREGATE: {Phase.DEDUPLICATE, Phase.FAIL},
    Phase.DEDUPLICATE: {Phase.ENRICH, Phase.FAIL},
    Phase.ENRICH: {Phase.FILTER, Phase.COMPLETE, Phase.FAIL},
    Phase.FILTER: {Phase.COMPLETE, Phase.FAIL},
    Phase.COMPLETE: set(),  # terminal
    Phase.FAIL: set(),  # terminal
}

TERMINAL_PHASES = {Phase.COMPLETE, Phase.FAIL}
