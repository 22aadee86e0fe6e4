"""Guard checks: project names, compose paths, confirmation phrases."""

import pytest

from devdb_agent.core.errors import (
    ConfirmationMismatch,
    EnvironmentRefused,
    InvalidInput,
    PathDisallowed,
)
from devdb_agent.core.guards import (
    check_confirmation,
    expected_confirmation,
    validate_path,
    validate_project,
)


@pytest.mark.parametrize("name", ["demo", "my.proj", "my_proj-2", "A1", "..."])
def test_valid_project_names(name: str) -> None:
    """Letters, digits, dot, underscore and hyphen are accepted."""

    validate_project(name, "development")


@pytest.mark.parametrize("name", ["", "my proj", "proj;rm -rf /", "a/b", "prøj", "$(id)"])
def test_invalid_project_names(name: str) -> None:
    """Anything else is InvalidInput."""

    with pytest.raises(InvalidInput):
        validate_project(name, "development")


@pytest.mark.parametrize("name", ["demo", "not valid!"])
def test_production_refused_before_name_check(name: str) -> None:
    """Production mode refuses every project, valid or not."""

    with pytest.raises(EnvironmentRefused) as info:
        validate_project(name, "production")
    assert info.value.fatal


@pytest.mark.parametrize(
    "path", ["docker-compose.yml", "deploy/compose.yml", "/abs/compose.yml", "a..b/compose.yml"]
)
def test_paths_without_parent_segment_allowed(path: str) -> None:
    """No '..' segment means no restriction."""

    validate_path(path, "docker-compose.yml")


def test_parent_segment_only_allowed_when_canonical() -> None:
    """A '..' path is accepted only when it is byte-for-byte the configured path."""

    validate_path("../app/docker-compose.yml", "../app/docker-compose.yml")
    with pytest.raises(PathDisallowed):
        validate_path("../app/docker-compose.yml", "docker-compose.yml")
    with pytest.raises(PathDisallowed):
        validate_path("../app//docker-compose.yml", "../app/docker-compose.yml")
    with pytest.raises(PathDisallowed):
        validate_path("..\\secrets\\compose.yml", "docker-compose.yml")


def test_confirmation_exact_match() -> None:
    """Only 'RESET <project>' with a single space confirms."""

    assert expected_confirmation("myproj") == "RESET myproj"
    check_confirmation("RESET myproj", "myproj")
    for phrase in ["reset myproj", "RESET  myproj", "RESET myproj2", "RESET myproj ", "", None]:
        with pytest.raises(ConfirmationMismatch) as info:
            check_confirmation(phrase, "myproj")
        assert info.value.expected == "RESET myproj"
