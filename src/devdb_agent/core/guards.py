"""Validation predicates run by every guarded tool before it touches the engine."""

import re

from devdb_agent.core.errors import (
    ConfirmationMismatch,
    EnvironmentRefused,
    InvalidInput,
    PathDisallowed,
)

_PROJECT_RE = re.compile(r"^[A-Za-z0-9._-]+$")
PRODUCTION = "production"


def validate_project(name: str, env_mode: str) -> None:
    """
    Reject project names outside ``[A-Za-z0-9._-]``.

    The production guard lives here on purpose: every guarded operation validates its project, so
    every one of them re-checks the environment mode.  Production wins over a malformed name.
    """
    if env_mode == PRODUCTION:
        raise EnvironmentRefused("refusing to run in production ENV")
    if not isinstance(name, str) or not _PROJECT_RE.match(name):
        raise InvalidInput(f"invalid project name: {name!r}")


def _has_parent_segment(path: str) -> bool:
    return ".." in re.split(r"[\\/]", path)


def validate_path(path: str, canonical_path: str) -> None:
    """Allow *path* unless it walks up a directory and is not exactly *canonical_path*."""
    if _has_parent_segment(path) and path != canonical_path:
        raise PathDisallowed(f"disallowed path: {path!r} (only allowed: {canonical_path!r})")


def expected_confirmation(project: str) -> str:
    return f"RESET {project}"


def check_confirmation(phrase: str | None, project: str) -> None:
    """Exact, case-sensitive match against ``RESET <project>``."""
    expected = expected_confirmation(project)
    if phrase != expected:
        raise ConfirmationMismatch(expected)
