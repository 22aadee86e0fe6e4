"""Fixed-interval polling against a wall-clock deadline."""

import logging
import time
from enum import Enum
from typing import Callable

from devdb_agent.core.errors import DevDBError

logger = logging.getLogger(__name__)


class PollOutcome(str, Enum):
    SUCCEEDED = "succeeded"
    TIMED_OUT = "timed-out"
    PROBE_FAILED = "probe-failed"  # deadline hit while the probe itself kept erroring


def poll_until(
    probe: Callable[[], bool],
    interval: float,
    deadline: float,
    *,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> PollOutcome:
    """
    Call *probe* every *interval* seconds until it returns True or *deadline* seconds pass.

    A probe raising :class:`DevDBError` counts as "not yet"; only the deadline stops the loop.
    """
    end = clock() + deadline
    attempt = 0
    last_failed = False
    while clock() < end:
        attempt += 1
        try:
            if probe():
                logger.debug("Probe succeeded on attempt %d", attempt)
                return PollOutcome.SUCCEEDED
            last_failed = False
        except DevDBError as exc:
            logger.debug("Probe attempt %d failed: %s", attempt, exc)
            last_failed = True
        sleep(interval)
    return PollOutcome.PROBE_FAILED if last_failed else PollOutcome.TIMED_OUT
