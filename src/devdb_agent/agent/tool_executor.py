"""Dispatches tool calls registered in ``devdb_agent.tools`` and wraps errors."""

import logging
from typing import (
    Any,
    Dict,
)

from devdb_agent.common import to_json
from devdb_agent.config import Settings
from devdb_agent.core.errors import (
    DevDBError,
    InvalidInput,
    UnknownTool,
)
from devdb_agent.core.schema import ToolResult
from devdb_agent.tools import (
    TOOL_REGISTRY,
    tool_parameters,
)
from devdb_agent.tools.context import ToolContext

logger = logging.getLogger(__name__)


def fill_defaults(name: str, args: Dict[str, Any], settings: Settings) -> Dict[str, Any]:
    """Return *args* with the target fields the model left out taken from configuration."""
    defaults = {
        "project": settings.PROJECT,
        "compose_file": settings.COMPOSE_FILE,
        "service": settings.DB_SERVICE,
        "db_service": settings.DB_SERVICE,
    }
    filled = dict(args)
    for param in tool_parameters(name):
        if param in defaults and param not in filled:
            filled[param] = defaults[param]
    return filled


def _error_result(exc: Exception) -> ToolResult:
    return ToolResult(content=f"Error: {exc}", is_error=True, error=exc)


def execute_tool(name: str, args: Dict[str, Any] | None, ctx: ToolContext) -> ToolResult:
    """
    Look up *name* in the registry and invoke it with *args*.

    Parameters
    ----------
    name:
        The registered tool name.
    args:
        Keyword arguments from the model.  If *None*, an empty dict is assumed.  Missing target
        fields are back-filled from ``ctx.settings``.
    ctx:
        Shared runtime dependencies, passed to the tool as its first argument.

    Returns
    -------
    ToolResult
        The tool's JSON output, or an error-flagged result.  Never raises for tool failures: an
        unknown tool, bad arguments and every :class:`DevDBError` become error results.
    """

    if args is None:
        args = {}

    tool_fn = TOOL_REGISTRY.get(name)
    if tool_fn is None:
        exc = UnknownTool(f"unknown tool {name!r}")
        logger.warning("Model requested unknown tool '%s'", name)
        return ToolResult(content=to_json({"error": str(exc)}), is_error=True, error=exc)

    args = fill_defaults(name, args, ctx.settings)
    try:
        logger.debug("Executing tool '%s' with args=%s", name, args)
        return ToolResult(content=tool_fn(ctx, **args))
    except (TypeError, ValueError) as exc:
        # Argument mismatch or a badly typed value (pydantic ValidationError is a ValueError).
        logger.warning("Argument error while executing tool '%s': %s", name, exc)
        return _error_result(InvalidInput(f"invalid arguments for tool '{name}': {exc}"))
    except DevDBError as exc:
        logger.warning("Tool '%s' failed: %s", name, exc)
        return _error_result(exc)
