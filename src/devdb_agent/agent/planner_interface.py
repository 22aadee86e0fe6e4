"""
Planner interface for devdb_agent.

This module is the only place that *directly* calls an LLM.  Everything else (conversation loop,
tools, guards) stays model-agnostic and talks in :mod:`devdb_agent.core.schema` types.

Back-ends subclass :class:`BasePlanner` and register via :func:`register_planner`.  The Anthropic
Messages API with native tool use is supported out of the box.
"""

import logging
from abc import (
    ABC,
    abstractmethod,
)
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Optional,
    Sequence,
    Type,
)

import anthropic
import httpx

from devdb_agent.config import Settings
from devdb_agent.core.errors import ProviderRequestFailed
from devdb_agent.core.schema import (
    ContentBlock,
    Message,
    ToolDeclaration,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Registry helpers
# ---------------------------------------------------------------------------
_PLANNER_REGISTRY: dict[str, Type["BasePlanner"]] = {}


def register_planner(name: str) -> Callable:
    """Decorator to register a planner class under *name*."""

    def wrapper(cls: Type["BasePlanner"]) -> Type["BasePlanner"]:
        _PLANNER_REGISTRY[name] = cls
        return cls

    return wrapper


def load_planner(settings: Settings, name: str | None = None) -> "BasePlanner":
    """
    Factory that returns an instantiated planner.

    Fallback order:
    1. *name* arg
    2. ``settings.PLANNER`` env option
    """

    target = name or settings.PLANNER
    cls = _PLANNER_REGISTRY.get(target.lower())
    if cls is None:
        raise ValueError(f"Planner '{target}' is not registered.")
    return cls(settings)


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------
class BasePlanner(ABC):
    """Abstract planner: one request/response exchange per conversation round."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @abstractmethod
    def respond(
        self,
        system: str,
        tools: Sequence[ToolDeclaration],
        messages: Sequence[Message],
    ) -> List[ContentBlock]:
        """Return the ordered content blocks (text and tool_use) of the model's reply."""


# ---------------------------------------------------------------------------
# Concrete planners
# ---------------------------------------------------------------------------
def _to_block(block: Any) -> Optional[ContentBlock]:
    if block.type == "tool_use":
        return ContentBlock(
            type="tool_use", id=block.id, name=block.name, input=dict(block.input or {})
        )
    if block.type == "text":
        return ContentBlock.from_text(block.text)
    # Other block kinds (thinking etc.) are not replayed.
    return None


@register_planner("anthropic")
class AnthropicPlanner(BasePlanner):
    """Anthropic Claude planner using native tool use."""

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings)
        self._client = anthropic.Anthropic(
            api_key=settings.ANTHROPIC_API_KEY,
            timeout=httpx.Timeout(settings.PROVIDER_TIMEOUT, connect=10.0),
            max_retries=2,
        )

    def respond(
        self,
        system: str,
        tools: Sequence[ToolDeclaration],
        messages: Sequence[Message],
    ) -> List[ContentBlock]:
        payload: Dict[str, Any] = {
            "model": self.settings.ANTHROPIC_MODEL,
            "max_tokens": self.settings.MAX_TOKENS,
            "system": system,
            "tools": [tool.model_dump() for tool in tools],
            "messages": [message.to_wire() for message in messages],
        }
        try:
            response = self._client.messages.create(**payload)
        except anthropic.APIError as exc:
            logger.error("Anthropic request error: %s", exc)
            raise ProviderRequestFailed(f"Anthropic request failed: {exc}") from exc

        logger.debug("Anthropic stop_reason=%s", response.stop_reason)
        blocks = [_to_block(block) for block in response.content]
        return [block for block in blocks if block is not None]
