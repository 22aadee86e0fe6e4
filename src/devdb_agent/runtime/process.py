"""
Run external commands for the guarded tools.

Side-effecting commands go through :meth:`ProcessRunner.run`, which honours the
process-wide dry-run switch.  Capability and liveness checks go through
:meth:`ProcessRunner.probe`, which always executes for real since it only inspects
the environment.
"""

import logging
import os
import shlex
import subprocess
from typing import (
    Mapping,
    Sequence,
)

from devdb_agent.core.errors import CommandFailed

logger = logging.getLogger(__name__)

LONG_TIMEOUT = 600.0  # seconds
PROBE_TIMEOUT = 2.0
DRY_RUN_MARKER = "[dry-run]"


def describe(argv: Sequence[str]) -> str:
    """Render *argv* as the command line an operator would type."""
    return " ".join(argv)


class ProcessRunner:
    """Execute commands with a wall-clock timeout, optionally only describing them."""

    def __init__(self, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def run(
        self,
        argv: Sequence[str],
        *,
        timeout: float = LONG_TIMEOUT,
        extra_env: Mapping[str, str] | None = None,
    ) -> str:
        """
        Run *argv* and return its standard output.

        Parameters
        ----------
        argv:
            Program and arguments; never passed through a shell.
        timeout:
            Hard ceiling in seconds.
        extra_env:
            Variables layered on top of the current environment (not replacing it).

        Raises
        ------
        CommandFailed
            On non-zero exit, timeout or a missing binary.  ``output`` holds stdout + stderr.
        """
        cmd_line = describe(argv)
        if self.dry_run:
            logger.info("%s %s", DRY_RUN_MARKER, cmd_line)
            return f"{DRY_RUN_MARKER} {cmd_line}"

        env = None
        if extra_env:
            env = os.environ.copy()
            env.update(extra_env)

        logger.debug("Running: %s", shlex.join(argv))
        try:
            proc = subprocess.run(
                list(argv),
                capture_output=True,
                text=True,
                timeout=timeout,
                env=env,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            output = _as_text(exc.stdout) + _as_text(exc.stderr)
            raise CommandFailed(
                cmd_line, f"timed out after {timeout:g}s", output, _as_text(exc.stderr)
            ) from exc
        except OSError as exc:
            raise CommandFailed(cmd_line, str(exc)) from exc

        if proc.returncode != 0:
            logger.debug("Command exited %d: %s", proc.returncode, cmd_line)
            raise CommandFailed(
                cmd_line,
                f"exit status {proc.returncode}",
                proc.stdout + proc.stderr,
                proc.stderr,
            )
        return proc.stdout

    def probe(self, argv: Sequence[str], *, timeout: float = PROBE_TIMEOUT) -> bool:
        """Return True when *argv* runs and exits zero (always executed, output discarded)."""
        try:
            proc = subprocess.run(
                list(argv),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=timeout,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired):
            logger.debug("Probe failed to run: %s", describe(argv))
            return False
        return proc.returncode == 0


def _as_text(data: str | bytes | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
