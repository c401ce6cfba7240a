"""
Start-time handling for alert muting rules.

The API moves a rule's ``startTime`` forward to "now" when the requested
start has already passed. The value it actually honors is kept as the
observed ``effective_start_time`` (milliseconds) and the declared
``start_time`` (seconds) is left untouched.

Changing ``start_time`` forces recreation of the rule. Recreating
automatically when an already-started rule is updated is deliberately not
done; the API overrides past-dated starts on its own.
"""

from __future__ import annotations

import logging
import time
from typing import Optional, Tuple

from sfxprovider.models import AlertMutingRuleState

logger = logging.getLogger(__name__)


def seconds_to_millis(seconds: int) -> int:
    return seconds * 1000


def millis_to_seconds(millis: int) -> int:
    return millis // 1000


def creation_start_time(state: AlertMutingRuleState) -> int:
    """Start time to send on create: the declared value, verbatim."""
    return seconds_to_millis(state.start_time)


def select_update_start_time(
    state: AlertMutingRuleState, now: Optional[int] = None
) -> Tuple[int, str]:
    """
    Choose the start time to send on update, and where it came from.

    Evaluated on every call. When the declared start is at or before ``now``
    and an effective start has been observed, the observed value is resent;
    the API would ignore the stale declared value anyway and resending it
    shows up as drift.

    Args:
        state: Declared state carrying the previously observed effective start
        now: Current Unix time in seconds (defaults to the wall clock)

    Returns:
        Tuple of (start time in milliseconds, ``"declared"`` or ``"effective"``)
    """
    if not state.effective_start_time:
        return seconds_to_millis(state.start_time), "declared"

    current = int(time.time()) if now is None else now
    if state.start_time <= current:
        logger.debug(
            "Start time %d is in the past, resending effective start time %d",
            state.start_time,
            state.effective_start_time,
        )
        return state.effective_start_time, "effective"

    logger.debug("Using declared start time %d", state.start_time)
    return seconds_to_millis(state.start_time), "declared"


def update_start_time(state: AlertMutingRuleState, now: Optional[int] = None) -> int:
    """Start time in milliseconds to send on update."""
    return select_update_start_time(state, now)[0]
