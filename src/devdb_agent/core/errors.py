"""
Error taxonomy shared by the guards, the runtime and the agent loop.

Every guarded tool raises one of these; :func:`devdb_agent.agent.tool_executor.execute_tool`
turns them into error-flagged tool results so the model can adapt.  Errors whose ``fatal`` flag is
set cannot be fixed by retrying with other arguments and end the run.
"""


class DevDBError(RuntimeError):
    """Base class for every failure raised by devdb_agent."""

    fatal: bool = False


class InvalidInput(DevDBError):
    """Raised when a tool argument is malformed (bad project name, wrong arguments)."""


class EnvironmentRefused(DevDBError):
    """Raised when the environment mode forbids any guarded operation."""

    fatal = True


class PathDisallowed(DevDBError):
    """Raised when a compose file path escapes the project tree."""


class EngineUnavailable(DevDBError):
    """Raised when the container engine is down and cannot be bootstrapped."""

    fatal = True


class EngineStartTimeout(DevDBError):
    """Raised when the bootstrapped engine does not answer before the deadline."""

    fatal = True


class ServiceNotFound(DevDBError):
    """Raised when compose lists no container for a service."""


class CommandFailed(DevDBError):
    """Raised when an external command exits non-zero, times out or cannot be spawned."""

    def __init__(self, command: str, cause: str, output: str = "", stderr: str = "") -> None:
        super().__init__(f"{command}: {cause}\n{stderr}".rstrip())
        self.command = command
        self.output = output
        self.stderr = stderr


class HealthTimeout(DevDBError):
    """Raised when a service does not report healthy before the deadline."""


class ConfirmationMismatch(DevDBError):
    """Raised when a destructive operation is not confirmed with the exact phrase."""

    def __init__(self, expected: str) -> None:
        super().__init__(f"confirmation mismatch; expected {expected!r}")
        self.expected = expected


class UnknownTool(DevDBError):
    """Raised (and reported) when the model asks for a tool outside the catalogue."""


class ProviderRequestFailed(DevDBError):
    """Raised when the language-model provider rejects or fails a request."""


class RoundBudgetExhausted(DevDBError):
    """Raised when the model is still requesting tools after the last allowed round."""
