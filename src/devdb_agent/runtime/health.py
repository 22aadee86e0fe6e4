"""Wait for a compose service's container to report healthy."""

import logging
import time
from typing import Callable

from devdb_agent.core.errors import HealthTimeout
from devdb_agent.core.schema import (
    HealthState,
    Target,
)
from devdb_agent.runtime.compose import ComposeCli
from devdb_agent.runtime.polling import (
    PollOutcome,
    poll_until,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 180.0  # seconds
POLL_INTERVAL = 3.0
HEALTH_FORMAT = "{{.State.Health.Status}}"


def inspect_health(compose: ComposeCli, container: str) -> str:
    """Raw health status string the engine reports for *container*."""
    return compose.runner.run(["docker", "inspect", "--format", HEALTH_FORMAT, container])


def classify(status: str) -> HealthState:
    """Map an inspected status to a state; any status containing ``"healthy"`` counts."""
    if HealthState.HEALTHY.value in status:
        return HealthState.HEALTHY
    return HealthState.STARTING


def describe_health_check(compose: ComposeCli, target: Target) -> str:
    """Dry-run echo of the inspection a health wait would poll."""
    return inspect_health(compose, f"<{target.service} container>")


def wait_healthy(
    compose: ComposeCli,
    target: Target,
    timeout: float | None = None,
    *,
    interval: float = POLL_INTERVAL,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> HealthState:
    """
    Resolve the container of *target* and poll its health until healthy or *timeout* elapses.

    Returns
    -------
    HealthState
        ``HEALTHY`` once the inspected status contains ``"healthy"``; ``UNKNOWN`` under dry-run,
        where nothing can be inspected.

    Raises
    ------
    ServiceNotFound
        If compose lists no container for the service.
    HealthTimeout
        If the deadline passes first.
    """
    timeout = timeout or DEFAULT_TIMEOUT
    container = compose.container_id(target)
    if compose.runner.dry_run:
        logger.info("Dry-run: not polling health of %s", target.service)
        return HealthState.UNKNOWN

    logger.info("Waiting up to %gs for %s/%s", timeout, target.project, target.service)

    def _is_healthy() -> bool:
        state = classify(inspect_health(compose, container))
        logger.debug("Health of %s: %s", target.service, state.value)
        return state is HealthState.HEALTHY

    outcome = poll_until(_is_healthy, interval, timeout, sleep=sleep, clock=clock)
    if outcome is PollOutcome.SUCCEEDED:
        return HealthState.HEALTHY
    raise HealthTimeout(
        f"service {target.service!r} not healthy within {timeout:g}s "
        f"(status: {HealthState.TIMEOUT.value})"
    )
