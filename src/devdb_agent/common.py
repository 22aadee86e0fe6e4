"""Common utility functions for the project."""

import json
import sys
from enum import Enum
from typing import (
    Any,
    Mapping,
    TextIO,
)


class AnsiColors(Enum):
    """
    ANSI color codes for terminal output.
    """

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[33m"
    BLUE = "\033[94m"


def colored_print(text: str, color: AnsiColors, *args: Any, **kwargs: Any) -> None:
    """
    Print text in color.

    Args:
        text: The text to print
        color: The color to use (AnsiColors enum)
        args: Additional positional arguments for print
        kwargs: Additional keyword arguments for print
    """
    print(f"{color.value}{text}\033[0m", *args, **kwargs)  # ANSI reset at the end


def to_json(payload: Mapping[str, Any]) -> str:
    """Serialise a tool payload the way the model receives it."""
    return json.dumps(dict(payload))


def ask_yes_no(prompt: str, default: bool, stream: TextIO | None = None) -> bool:
    """
    Ask a yes/no question on the terminal.

    Returns *default* without blocking when *stream* is not an interactive
    terminal, or when the operator just presses enter.
    """
    stream = stream if stream is not None else sys.stdin
    if not stream.isatty():
        return default

    print(prompt, end="", flush=True)
    answer = stream.readline().strip().lower()
    if not answer:
        return default
    return answer in {"y", "yes"}
