"""
Tool registry for devdb_agent.

This module provides a decorator to register tools and a registry to look them up by name.
Tools are functions taking a :class:`~devdb_agent.tools.context.ToolContext` first, then keyword
arguments, and returning the JSON text handed back to the model.  The catalogue the model sees is
derived from their signatures and docstrings; importing this package registers the full catalogue.
"""

import inspect
import logging
import types
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Sequence,
    Tuple,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from devdb_agent.core.schema import ToolDeclaration

logger = logging.getLogger(__name__)

TOOL_REGISTRY: Dict[str, Callable] = {}
"""Global registry of tool functions."""

_REQUIRED: Dict[str, Tuple[str, ...]] = {}
_CONTEXT_PARAM = "ctx"
_JSON_TYPES = {str: "string", bool: "boolean", int: "integer", float: "number"}


def register_tool(name: str, required: Sequence[str] | None = None) -> Callable:
    """
    Register a tool function with the given name.

    The name must be unique and is what the model calls.  Parameters without a default are declared
    required; pass *required* to declare a parameter required even though the function defaults it
    (so a missing value reaches the tool's own check instead of failing as a bad call).

    Raises
    ------
    ValueError
        If a function with the same name is already registered.
    """
    if name in TOOL_REGISTRY:
        raise ValueError(f"Tool '{name}' is already registered.")
    logger.debug("Registering tool '%s'", name)

    def wrapper(fn: Callable) -> Callable:
        TOOL_REGISTRY[name] = fn
        if required is not None:
            _REQUIRED[name] = tuple(required)
        return fn

    return wrapper


def _json_type(hint: Any) -> str:
    if get_origin(hint) in (Union, types.UnionType):
        hint = next(arg for arg in get_args(hint) if arg is not type(None))
    return _JSON_TYPES.get(hint, "string")


def tool_parameters(name: str) -> List[str]:
    """Model-facing parameter names of tool *name* (the context parameter excluded)."""
    sig = inspect.signature(TOOL_REGISTRY[name])
    return [p for p in sig.parameters if p != _CONTEXT_PARAM]


def get_tool_declaration(name: str) -> ToolDeclaration:
    """Build the declaration of one registered tool from its signature."""
    func = TOOL_REGISTRY[name]
    sig = inspect.signature(func)
    type_hints = get_type_hints(func)
    properties: Dict[str, Dict[str, str]] = {}
    required: List[str] = []
    for param_name, param in sig.parameters.items():
        if param_name == _CONTEXT_PARAM:
            continue
        properties[param_name] = {"type": _json_type(type_hints.get(param_name, str))}
        if param.default is inspect.Parameter.empty:
            required.append(param_name)
    if name in _REQUIRED:
        required = list(_REQUIRED[name])

    schema: Dict[str, Any] = {
        "type": "object",
        "properties": properties,
        "additionalProperties": False,
    }
    if required:
        schema["required"] = required
    return ToolDeclaration(
        name=name, description=inspect.getdoc(func) or "", input_schema=schema
    )


def get_tool_declarations() -> List[ToolDeclaration]:
    """Declarations of the whole catalogue, in registration order."""
    return [get_tool_declaration(name) for name in TOOL_REGISTRY]


# Registers the catalogue.
from devdb_agent.tools import docker_tools  # noqa: E402,F401  pylint: disable=wrong-import-position
