"""Main conversation loop for devdb_agent."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import (
    Callable,
    List,
    Tuple,
)

from devdb_agent.agent.planner_interface import BasePlanner
from devdb_agent.agent.tool_executor import execute_tool
from devdb_agent.config import Settings
from devdb_agent.core.errors import RoundBudgetExhausted
from devdb_agent.core.guards import expected_confirmation
from devdb_agent.core.schema import (
    ContentBlock,
    Message,
    ToolCall,
    ToolResult,
)
from devdb_agent.tools import get_tool_declarations
from devdb_agent.tools.context import ToolContext

logger = logging.getLogger(__name__)

DEFAULT_INSTRUCTION = "Ramp up the DB and wait until it's ready."


def system_prompt(settings: Settings) -> str:
    """Framing sent with every round: the bound defaults and the reset rule."""
    project = settings.PROJECT or "unknown-project"
    return f"""\
You are a cautious project-scoped Dev DB agent for "{project}".
You manage docker compose for the database only.

Defaults:
- project = {project}
- compose_file = {settings.COMPOSE_FILE}
- db_service = {settings.DB_SERVICE}

Rules:
- Use compose_up/compose_down/wait_healthy/service_logs/db_reset tools as needed.
- For destructive resets, require confirm_phrase = "{expected_confirmation(project)}".
- Keep responses short and actionable.\
"""


class LoopState(str, Enum):
    AWAITING_RESPONSE = "awaiting-response"
    DISPATCHING_TOOLS = "dispatching-tools"
    DONE = "done"
    ABORTED_BUDGET = "aborted-budget"


@dataclass
class ConversationResult:
    """Final answer plus the transcript that produced it."""

    answer: str
    rounds: int
    messages: Tuple[Message, ...]


ToolObserver = Callable[[ToolCall, ToolResult], None]


class Conversation:
    """Append-only message history."""

    def __init__(self) -> None:
        self._messages: List[Message] = []

    def append(self, message: Message) -> None:
        self._messages.append(message)

    @property
    def messages(self) -> Tuple[Message, ...]:
        return tuple(self._messages)


class ConversationDriver:
    """
    Drives bounded request/response rounds between the planner and the tool catalogue.

    Each round sends the whole catalogue and history.  A reply without tool calls ends the run;
    otherwise every call is executed in order and all results go back in one user message.
    """

    def __init__(
        self,
        planner: BasePlanner,
        ctx: ToolContext,
        on_tool_result: ToolObserver | None = None,
    ) -> None:
        self.planner = planner
        self.ctx = ctx
        self.max_rounds = ctx.settings.MAX_STEPS
        self.on_tool_result = on_tool_result
        self.state = LoopState.AWAITING_RESPONSE
        self.conversation = Conversation()

    def _dispatch(self, calls: List[ToolCall]) -> Tuple[Message, Exception | None]:
        """Execute *calls* in order; stop at the first fatal error and hand it back."""
        blocks: List[ContentBlock] = []
        fatal: Exception | None = None
        for call in calls:
            logger.info("Dispatching tool '%s'", call.name)
            result = execute_tool(call.name, call.args, self.ctx)
            blocks.append(ContentBlock.from_result(call, result))
            if self.on_tool_result is not None:
                self.on_tool_result(call, result)
            if result.error is not None and getattr(result.error, "fatal", False):
                # Nothing the model can retry; stop here.
                fatal = result.error
                break
        return Message(role="user", content=blocks), fatal

    def run(self, instruction: str) -> ConversationResult:
        """
        Run the conversation for *instruction*.

        Raises
        ------
        RoundBudgetExhausted
            If the model still requests tools after the last round.
        ProviderRequestFailed
            If the planner cannot complete an exchange.
        DevDBError
            A fatal tool error (production refusal, engine unavailable).
        """
        conversation = self.conversation = Conversation()
        conversation.append(Message(role="user", content=[ContentBlock.from_text(instruction)]))
        system = system_prompt(self.ctx.settings)
        tools = get_tool_declarations()

        for round_no in range(1, self.max_rounds + 1):
            self.state = LoopState.AWAITING_RESPONSE
            blocks = self.planner.respond(system, tools, conversation.messages)
            reply = Message(role="assistant", content=blocks)
            conversation.append(reply)

            calls = reply.tool_calls()
            if not calls:
                self.state = LoopState.DONE
                logger.info("Final answer after %d round(s)", round_no)
                return ConversationResult(reply.text(), round_no, conversation.messages)

            self.state = LoopState.DISPATCHING_TOOLS
            logger.info(
                "Round %d: %d tool call(s): %s", round_no, len(calls), [c.name for c in calls]
            )
            results, fatal = self._dispatch(calls)
            conversation.append(results)
            if fatal is not None:
                raise fatal

        self.state = LoopState.ABORTED_BUDGET
        raise RoundBudgetExhausted(f"Stopped after too many tool steps ({self.max_rounds}).")
