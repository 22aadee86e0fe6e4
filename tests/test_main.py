"""Entry point: default instruction, exit codes, terminal output."""

import io
from typing import List

import pytest

from conftest import FakeRunner

from devdb_agent import main as entry
from devdb_agent.agent.agent_loop import DEFAULT_INSTRUCTION
from devdb_agent.common import ask_yes_no
from devdb_agent.core.errors import ProviderRequestFailed
from devdb_agent.core.schema import ContentBlock


class _Planner:
    def __init__(self, reply: List[ContentBlock] | Exception) -> None:
        self.reply = reply
        self.instructions: List[str] = []

    def respond(self, system, tools, messages):
        self.instructions.append(messages[0].content[0].text)
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


@pytest.fixture
def wired(monkeypatch: pytest.MonkeyPatch, make_ctx):
    """Patch the entry point's collaborators; returns a setter for the planner reply."""

    def _wire(reply) -> _Planner:
        planner = _Planner(reply)
        monkeypatch.setattr(entry.settings, "ANTHROPIC_API_KEY", "test-key")
        monkeypatch.setattr(entry, "load_planner", lambda settings: planner)
        monkeypatch.setattr(entry, "build_context", lambda settings: make_ctx(FakeRunner()))
        monkeypatch.setattr(entry, "_init_logging", lambda level: None)
        return planner

    return _wire


def test_default_instruction_and_answer(wired, capsys: pytest.CaptureFixture) -> None:
    planner = wired([ContentBlock.from_text("DB is ready.")])
    assert entry.main([]) == 0
    assert planner.instructions == [DEFAULT_INSTRUCTION]
    assert "DB is ready." in capsys.readouterr().out


def test_instruction_words_joined(wired) -> None:
    planner = wired([ContentBlock.from_text("ok")])
    entry.main(["show", "the", "logs"])
    assert planner.instructions == ["show the logs"]


def test_provider_failure_reported(wired, capsys: pytest.CaptureFixture) -> None:
    wired(ProviderRequestFailed("status 529: overloaded"))
    assert entry.main(["up"]) == 1
    assert "overloaded" in capsys.readouterr().out


def test_missing_api_key(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    monkeypatch.setattr(entry.settings, "ANTHROPIC_API_KEY", None)
    monkeypatch.setattr(entry, "_init_logging", lambda level: None)
    assert entry.main([]) == 1
    assert "ANTHROPIC_API_KEY" in capsys.readouterr().out


def test_ask_yes_no_non_interactive_uses_default() -> None:
    assert ask_yes_no("Delete? ", True, stream=io.StringIO("n\n")) is True
    assert ask_yes_no("Delete? ", False, stream=io.StringIO("y\n")) is False


def test_ask_yes_no_interactive(capsys: pytest.CaptureFixture) -> None:
    class _Tty(io.StringIO):
        def isatty(self) -> bool:
            return True

    assert ask_yes_no("Delete? ", False, stream=_Tty("yes\n")) is True
    assert ask_yes_no("Delete? ", True, stream=_Tty("no\n")) is False
    assert ask_yes_no("Delete? ", True, stream=_Tty("\n")) is True
    assert "Delete? " in capsys.readouterr().out
