"""
The guarded docker tools the model may call.

Every tool re-runs engine readiness (unless ``ENSURE_DOCKER_AUTO`` is off) and the guard checks
itself before touching the engine: the model may call any tool, in any order, any number of times.
Docstrings are the descriptions the model reads.
"""

import logging

from devdb_agent.common import to_json
from devdb_agent.core.guards import (
    check_confirmation,
    validate_path,
    validate_project,
)
from devdb_agent.core.schema import Target
from devdb_agent.runtime.compose import volume_name
from devdb_agent.runtime.engine import ensure_docker_ready
from devdb_agent.runtime.health import (
    DEFAULT_TIMEOUT,
    describe_health_check,
    wait_healthy as _wait_healthy,
)
from devdb_agent.tools import register_tool
from devdb_agent.tools.context import ToolContext

logger = logging.getLogger(__name__)

DEFAULT_TAIL = 200


def _ensure_engine(ctx: ToolContext) -> str:
    return ensure_docker_ready(
        ctx.runner, ctx.settings.ENGINE_BOOTSTRAPPER, sleep=ctx.sleep, clock=ctx.clock
    )


def _preflight(ctx: ToolContext, project: str, compose_file: str = "") -> None:
    if ctx.settings.ENSURE_DOCKER_AUTO:
        _ensure_engine(ctx)
    validate_project(project, ctx.settings.ENV)
    if compose_file:
        validate_path(compose_file, ctx.settings.COMPOSE_FILE)


def _target(ctx: ToolContext, project: str, compose_file: str = "", service: str = "") -> Target:
    return Target(
        project=project,
        compose_file=compose_file,
        service=service,
        app_dir=ctx.settings.APP_DIR,
        env=ctx.app_env(),
    )


@register_tool("ensure_docker")
def ensure_docker(ctx: ToolContext) -> str:
    """Ensure Docker is reachable. If not, start Colima and wait until Docker responds."""
    return to_json({"status": _ensure_engine(ctx)})


@register_tool("compose_up")
def compose_up(ctx: ToolContext, project: str, compose_file: str, build: bool = False) -> str:
    """Start docker compose detached. Required: project, compose_file. Optional: build (bool) forces an image rebuild."""
    _preflight(ctx, project, compose_file)
    args = ["up", "-d"]
    if build:
        args.append("--build")
    out = ctx.compose.run_for(_target(ctx, project, compose_file), *args)
    return to_json({"output": out})


@register_tool("compose_down")
def compose_down(
    ctx: ToolContext, project: str, compose_file: str, remove_volumes: bool | None = None
) -> str:
    """Stop compose and remove its containers. Required: project, compose_file. Optional: remove_volumes (bool) also deletes named volumes; when omitted the operator is asked."""
    _preflight(ctx, project, compose_file)
    volume = volume_name(project, ctx.settings.DB_VOLUME_KEY)
    if remove_volumes is None:
        remove_volumes = ctx.confirm(
            f"Also delete named volume {volume}? [y/N]: ", ctx.settings.VOLUME_PROMPT_DEFAULT
        )

    args = ["down"]
    if remove_volumes:
        logger.warning("Removing volumes of project %s (%s)", project, volume)
        args.append("-v")
    out = ctx.compose.run_for(_target(ctx, project, compose_file), *args)
    return to_json(
        {"output": out, "volumes_removed": bool(remove_volumes), "volume": volume}
    )


@register_tool("wait_healthy")
def wait_healthy(
    ctx: ToolContext,
    project: str,
    service: str,
    timeout_sec: int = 0,
    compose_file: str = "",
) -> str:
    """Poll container health until healthy. Required: project, service. Optional: timeout_sec (default 180), compose_file."""
    _preflight(ctx, project, compose_file)
    target = _target(ctx, project, compose_file, service)
    state = _wait_healthy(
        ctx.compose,
        target,
        timeout_sec or DEFAULT_TIMEOUT,
        sleep=ctx.sleep,
        clock=ctx.clock,
    )
    if ctx.runner.dry_run:
        return to_json(
            {"status": state.value, "output": describe_health_check(ctx.compose, target)}
        )
    return to_json({"status": state.value})


@register_tool("service_logs")
def service_logs(
    ctx: ToolContext,
    project: str,
    service: str,
    compose_file: str = "",
    tail: int = DEFAULT_TAIL,
) -> str:
    """Return the last N lines of logs for a service. Required: project, service. Optional: compose_file, tail (default 200)."""
    _preflight(ctx, project, compose_file)
    container = ctx.compose.container_id(_target(ctx, project, compose_file, service))
    out = ctx.runner.run(["docker", "logs", "--tail", str(int(tail or DEFAULT_TAIL)), container])
    return to_json({"logs": out})


@register_tool(
    "db_reset", required=("project", "compose_file", "db_service", "confirm_phrase")
)
def db_reset(
    ctx: ToolContext,
    project: str,
    compose_file: str,
    db_service: str,
    confirm_phrase: str = "",
    seed_cmd: str = "",
) -> str:
    """Destructive: reset the DB with 'compose down -v' then 'up -d'. Removes containers, network and named volumes (data is lost). Requires confirm_phrase="RESET <project>". After starting, waits for the service to become healthy. Optional: seed_cmd, run inside the service container."""
    _preflight(ctx, project, compose_file)
    check_confirmation(confirm_phrase, project)

    target = _target(ctx, project, compose_file, db_service)
    volume = volume_name(project, ctx.settings.DB_VOLUME_KEY)

    # No rollback: once the volume is gone there is nothing to restore.
    logger.warning("Resetting %s: removing volume %s", project, volume)
    ctx.compose.run_for(target, "down", "-v")
    ctx.compose.run_for(target, "up", "-d")
    state = _wait_healthy(ctx.compose, target, DEFAULT_TIMEOUT, sleep=ctx.sleep, clock=ctx.clock)

    seed_out = ""
    if seed_cmd and seed_cmd.strip():
        seed_out = ctx.compose.run_for(target, "exec", "-T", db_service, "sh", "-lc", seed_cmd)

    return to_json(
        {"status": "reset-complete", "health": state.value, "volume": volume, "seed_out": seed_out}
    )
