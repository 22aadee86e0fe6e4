"""Per-process dependencies handed to every tool call."""

import logging
import time
from dataclasses import (
    dataclass,
    field,
)
from typing import (
    Callable,
    Dict,
)

from dotenv import dotenv_values

from devdb_agent.common import ask_yes_no
from devdb_agent.config import Settings
from devdb_agent.runtime.compose import (
    ComposeCli,
    detect_compose,
)
from devdb_agent.runtime.process import ProcessRunner

logger = logging.getLogger(__name__)


@dataclass
class ToolContext:
    """Configuration plus the runtime collaborators the guarded tools share."""

    settings: Settings
    runner: ProcessRunner
    compose: ComposeCli
    confirm: Callable[[str, bool], bool] = ask_yes_no
    sleep: Callable[[float], None] = field(default=time.sleep)
    clock: Callable[[], float] = field(default=time.monotonic)

    def app_env(self) -> Dict[str, str]:
        """Variables declared in the application's env file (empty if unset or missing)."""
        path = self.settings.APP_ENV_FILE
        if not path:
            return {}
        return {key: value for key, value in dotenv_values(path).items() if value is not None}


def build_context(settings: Settings) -> ToolContext:
    """Create the context once per run; compose detection happens here and is not repeated."""
    runner = ProcessRunner(dry_run=settings.DRY_RUN)
    base = detect_compose(settings.COMPOSE_CMD, runner.probe)
    logger.info("Using compose command: %s", " ".join(base))
    compose = ComposeCli(runner, base, app_dir=settings.APP_DIR)
    return ToolContext(settings=settings, runner=runner, compose=compose)
