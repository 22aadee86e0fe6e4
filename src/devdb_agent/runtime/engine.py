"""Make sure the container engine answers, bootstrapping a VM-backed engine when it does not."""

import logging
import time
from typing import Callable

from devdb_agent.core.errors import (
    CommandFailed,
    EngineStartTimeout,
    EngineUnavailable,
)
from devdb_agent.runtime.polling import (
    PollOutcome,
    poll_until,
)
from devdb_agent.runtime.process import ProcessRunner

logger = logging.getLogger(__name__)

LIVENESS_PROBE = ("docker", "info")
START_INTERVAL = 2.0  # seconds
START_DEADLINE = 90.0


def ensure_docker_ready(
    runner: ProcessRunner,
    bootstrapper: str = "colima",
    *,
    interval: float = START_INTERVAL,
    deadline: float = START_DEADLINE,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> str:
    """
    Return ``"ok"`` if the engine already answers, ``"started"`` after bootstrapping it.

    Not safe to run from two operations at once; callers run one operation at a time.
    """
    if runner.probe(LIVENESS_PROBE):
        return "ok"

    if not runner.probe([bootstrapper, "version"]):
        raise EngineUnavailable(
            f"docker daemon not reachable and {bootstrapper!r} not found; "
            f"start Docker/{bootstrapper} manually"
        )

    logger.info("Docker not reachable; starting %s", bootstrapper)
    try:
        runner.run([bootstrapper, "start"])
    except CommandFailed as exc:
        raise EngineUnavailable(f"failed to start {bootstrapper}: {exc}") from exc

    if runner.dry_run:
        # The start was only described, so the engine cannot come up.
        logger.info("Dry-run: not waiting for %s to start", bootstrapper)
        return "started"

    outcome = poll_until(
        lambda: runner.probe(LIVENESS_PROBE), interval, deadline, sleep=sleep, clock=clock
    )
    if outcome is not PollOutcome.SUCCEEDED:
        logger.warning("Docker still unreachable %gs after starting %s", deadline, bootstrapper)
        raise EngineStartTimeout(f"docker did not become ready after starting {bootstrapper}")
    return "started"
