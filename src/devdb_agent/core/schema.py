"""
Schema definitions for model <-> agent <-> tool messages.

These data models serve as the contract between the language model, the conversation loop, and
individual tools.  We keep them separate from runtime logic so they can be imported anywhere without
side-effects.  Messages and content blocks are frozen: the conversation only ever grows.
"""

from enum import Enum
from typing import (
    Any,
    Dict,
    List,
    Literal,
    Optional,
)

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
)


class HealthState(str, Enum):
    """Outcome of inspecting (or waiting on) a service container."""

    UNKNOWN = "unknown"
    NOT_FOUND = "not-found"
    STARTING = "starting"
    HEALTHY = "healthy"
    TIMEOUT = "timeout"


class Target(BaseModel):
    """The one compose-managed service scope an operation acts on."""

    model_config = ConfigDict(frozen=True)

    project: str
    compose_file: str = ""
    service: str = ""
    app_dir: Optional[str] = None
    env: Dict[str, str] = Field(default_factory=dict)


class ToolDeclaration(BaseModel):
    """A catalogue entry as the model sees it."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    input_schema: Dict[str, Any]


class ToolCall(BaseModel):
    """A call that the model wants the agent to execute."""

    model_config = ConfigDict(frozen=True)

    id: str = Field("", description="Provider-assigned invocation id")
    name: str = Field(..., description="Registered tool name")
    args: Dict[str, Any] = Field(default_factory=dict, description="Keyword arguments for the tool")


class ToolResult(BaseModel):
    """What one invocation produced; ``error`` keeps the underlying exception, if any."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    content: str
    is_error: bool = False
    error: Optional[Exception] = Field(default=None, exclude=True)


class ContentBlock(BaseModel):
    """One entry of a message: plain text, a tool request, or a tool result."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text", "tool_use", "tool_result"]
    text: Optional[str] = None
    id: Optional[str] = None
    name: Optional[str] = None
    input: Optional[Dict[str, Any]] = None
    tool_use_id: Optional[str] = None
    content: Optional[str] = None
    is_error: Optional[bool] = None

    @classmethod
    def from_text(cls, text: str) -> "ContentBlock":
        return cls(type="text", text=text)

    @classmethod
    def from_result(cls, call: ToolCall, result: ToolResult) -> "ContentBlock":
        return cls(
            type="tool_result",
            tool_use_id=call.id,
            content=result.content,
            is_error=result.is_error,
        )

    def as_call(self) -> ToolCall:
        """Convert a ``tool_use`` block into a :class:`ToolCall`."""
        return ToolCall(id=self.id or "", name=self.name or "", args=dict(self.input or {}))


class Message(BaseModel):
    """A single message in the conversation."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: List[ContentBlock]

    def tool_calls(self) -> List[ToolCall]:
        return [block.as_call() for block in self.content if block.type == "tool_use"]

    def text(self) -> str:
        parts = [block.text for block in self.content if block.type == "text" and block.text]
        return "\n".join(parts).strip()

    def to_wire(self) -> Dict[str, Any]:
        """Provider representation (unset fields dropped)."""
        return {
            "role": self.role,
            "content": [block.model_dump(exclude_none=True) for block in self.content],
        }
