"""Shared fakes: no test touches docker, colima or the network."""

from typing import (
    Any,
    Callable,
    Dict,
    List,
    Sequence,
)

import pytest

from devdb_agent.config import Settings
from devdb_agent.runtime.compose import (
    PLUGIN,
    ComposeCli,
)
from devdb_agent.runtime.process import ProcessRunner
from devdb_agent.tools.context import ToolContext


class FakeClock:
    """Monotonic clock advanced only by ``sleep``."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeRunner(ProcessRunner):
    """Records commands; *responder* maps an argv to output (or an exception to raise)."""

    def __init__(
        self,
        responder: Callable[[List[str]], Any] | None = None,
        probe_answer: Callable[[List[str]], bool] | None = None,
        dry_run: bool = False,
    ) -> None:
        super().__init__(dry_run=dry_run)
        self.responder = responder or (lambda argv: "")
        self.probe_answer = probe_answer or (lambda argv: True)
        self.calls: List[List[str]] = []
        self.envs: List[Dict[str, str]] = []
        self.probes: List[List[str]] = []

    def run(self, argv: Sequence[str], *, timeout: float = 600.0, extra_env=None) -> str:
        self.calls.append(list(argv))
        self.envs.append(dict(extra_env or {}))
        if self.dry_run:
            return "[dry-run] " + " ".join(argv)
        out = self.responder(list(argv))
        if isinstance(out, Exception):
            raise out
        return out

    def probe(self, argv: Sequence[str], *, timeout: float = 2.0) -> bool:
        self.probes.append(list(argv))
        return self.probe_answer(list(argv))


def make_settings(**overrides: Any) -> Settings:
    values: Dict[str, Any] = {
        "PROJECT": "demo",
        "COMPOSE_FILE": "docker-compose.yml",
        "DB_SERVICE": "db",
        "ENV": "development",
        "ENSURE_DOCKER_AUTO": False,
        "DRY_RUN": False,
        "APP_DIR": None,
        "APP_ENV_FILE": None,
        "ANTHROPIC_API_KEY": "test-key",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def healthy_db(argv: List[str]) -> str:
    """Responder for a compose project whose db container is up and healthy."""
    if "ps" in argv:
        return "abc123\n"
    if "inspect" in argv:
        return "healthy\n"
    return ""


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_ctx(clock: FakeClock) -> Callable[..., ToolContext]:
    """Build a ToolContext around a FakeRunner; keyword args override settings."""

    def _make(runner: FakeRunner | None = None, confirm=None, **overrides: Any) -> ToolContext:
        settings = make_settings(**overrides)
        runner = runner or FakeRunner()
        ctx = ToolContext(
            settings=settings,
            runner=runner,
            compose=ComposeCli(runner, PLUGIN, app_dir=settings.APP_DIR),
            sleep=clock.sleep,
            clock=clock,
        )
        if confirm is not None:
            ctx.confirm = confirm
        return ctx

    return _make
