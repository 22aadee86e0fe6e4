"""
devdb_agent entry point.

This file handles startup concerns (arg-parsing, env setup, logging), runs one conversation for the
operator's instruction and prints either the model's final answer or an explicit stop message.
"""

import argparse
import logging
import sys

from devdb_agent.agent.agent_loop import (
    DEFAULT_INSTRUCTION,
    ConversationDriver,
)
from devdb_agent.agent.planner_interface import load_planner
from devdb_agent.common import (
    AnsiColors,
    colored_print,
)
from devdb_agent.config import settings
from devdb_agent.core.errors import DevDBError
from devdb_agent.core.schema import (
    ToolCall,
    ToolResult,
)
from devdb_agent.tools.context import build_context

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _init_logging(level: str) -> None:
    numeric = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)


def _show_tool_result(call: ToolCall, result: ToolResult) -> None:
    color = AnsiColors.RED if result.is_error else AnsiColors.GREEN
    colored_print(f"[{call.name}] {result.content}", color)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for devdb_agent.

    Returns the process exit status: 0 when the model gave a final answer, 1 otherwise.
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = argparse.ArgumentParser(
        description="Manage the dev database with natural-language instructions"
    )
    parser.add_argument("instruction", nargs="*", help="What to do (default: bring the DB up)")
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error", "critical"],
        type=str.lower,
        default=settings.LOG_LEVEL,
        help="Logging level (default from env: %(default)s)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=settings.DRY_RUN,
        help="Describe external commands instead of running them",
    )
    args = parser.parse_args(argv)

    # Override settings with command-line arguments
    settings.LOG_LEVEL = args.log_level
    settings.DRY_RUN = args.dry_run

    _init_logging(settings.LOG_LEVEL)

    if not settings.ANTHROPIC_API_KEY:
        colored_print("Set ANTHROPIC_API_KEY in .env", AnsiColors.RED)
        return 1

    instruction = " ".join(args.instruction).strip() or DEFAULT_INSTRUCTION
    logger.info("Instruction: %s", instruction)
    logger.debug("Settings: %s", settings.model_dump(exclude={"ANTHROPIC_API_KEY"}))

    ctx = build_context(settings)
    driver = ConversationDriver(load_planner(settings), ctx, on_tool_result=_show_tool_result)
    try:
        result = driver.run(instruction)
    except DevDBError as exc:
        logger.error("Run aborted: %s", exc)
        colored_print(str(exc), AnsiColors.RED)
        return 1

    colored_print(result.answer or "(no answer)", AnsiColors.YELLOW)
    return 0


if __name__ == "__main__":
    sys.exit(main())
