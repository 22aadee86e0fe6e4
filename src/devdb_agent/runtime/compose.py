"""Build and run compose commands for whichever compose CLI shape is installed."""

import logging
from typing import (
    Callable,
    List,
    Mapping,
    Sequence,
    Tuple,
)

from devdb_agent.core.errors import ServiceNotFound
from devdb_agent.core.schema import Target
from devdb_agent.runtime.process import ProcessRunner

logger = logging.getLogger(__name__)

PLUGIN: Tuple[str, ...] = ("docker", "compose")
STANDALONE: Tuple[str, ...] = ("docker-compose",)

_OVERRIDES = {
    "docker-compose": STANDALONE,
    "docker compose": PLUGIN,
    "docker": PLUGIN,
}


def detect_compose(
    override: str | None, probe: Callable[[Sequence[str]], bool]
) -> Tuple[str, ...]:
    """
    Pick the compose invocation shape.

    Fallback order:
    1. explicit *override*
    2. ``docker compose`` plugin
    3. legacy ``docker-compose`` binary
    4. default: plugin shape
    """
    if override and override.strip() in _OVERRIDES:
        return _OVERRIDES[override.strip()]
    if probe([*PLUGIN, "version"]):
        return PLUGIN
    if probe([*STANDALONE, "version"]):
        return STANDALONE
    logger.warning("No compose CLI answered; assuming '%s'", " ".join(PLUGIN))
    return PLUGIN


def volume_name(project: str, volume_key: str) -> str:
    """Name compose gives a named volume declared in a project."""
    return f"{project}_{volume_key}"


class ComposeCli:
    """Compose command builder bound to one detected CLI shape and optional project directory."""

    def __init__(
        self, runner: ProcessRunner, base: Sequence[str], app_dir: str | None = None
    ) -> None:
        self.runner = runner
        self.base = tuple(base)
        self.app_dir = app_dir or None

    def build(self, args: Sequence[str], app_dir: str | None = None) -> List[str]:
        """Prefix *args* with the CLI shape and, when configured, ``--project-directory``."""
        args = list(args)
        directory = app_dir or self.app_dir
        if directory and "--project-directory" not in args:
            args = ["--project-directory", directory, *args]
        return [*self.base, *args]

    def run(
        self,
        args: Sequence[str],
        extra_env: Mapping[str, str] | None = None,
        app_dir: str | None = None,
    ) -> str:
        return self.runner.run(self.build(args, app_dir), extra_env=extra_env)

    @staticmethod
    def scope(target: Target) -> List[str]:
        args = ["-p", target.project]
        if target.compose_file:
            args += ["-f", target.compose_file]
        return args

    def run_for(self, target: Target, *args: str) -> str:
        """Run a project/file scoped sub-command with the target's application variables."""
        return self.run(
            [*self.scope(target), *args], extra_env=target.env or None, app_dir=target.app_dir
        )

    def container_id(self, target: Target) -> str:
        """Resolve the running container id of ``target.service``."""
        out = self.run([*self.scope(target), "ps", "-q", target.service], app_dir=target.app_dir)
        container = out.strip()
        if not container:
            raise ServiceNotFound(
                f"no container for service {target.service!r} (project {target.project!r})"
            )
        return container
