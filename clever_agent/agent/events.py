"""
Agent Lifecycle Events and Observers.

The Agent emits one event at each lifecycle point of a run:

    AgentStarted -> AgentThinking -> [ToolExecuting -> ToolExecuted]* ->
    AgentThinking -> ... -> AgentResponding -> AgentCompleted

A run that reaches the iteration cap ends with AgentCompleted as well; a run
aborted by an exception ends with AgentFailed. Observers are injected into
the Agent and receive every event through ``handle(event)``.

Pattern: Observer (injected listeners, no global dispatcher)
Pattern: Domain events as value objects (frozen Pydantic models)
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, ClassVar, Optional, Union

from pydantic import BaseModel, Field

from clever_agent.models.domain import AgentResponse


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Event Base
# =============================================================================


class AgentEvent(BaseModel):
    """
    Base class for agent lifecycle events.

    Attributes:
        agent_name: Name of the agent that emitted the event.
        run_id: Identifier of the execute() call the event belongs to.
        timestamp: When the event was created (UTC).
    """

    agent_name: str = Field(..., description="Emitting agent")
    run_id: str = Field(..., description="Agent run identifier")
    timestamp: datetime = Field(default_factory=_utc_now)

    model_config = {"frozen": True}

    event_name: ClassVar[str] = "agent_event"


# =============================================================================
# Lifecycle Events
# =============================================================================


class AgentStarted(AgentEvent):
    """A run began with the given user input."""

    event_name: ClassVar[str] = "agent_started"

    input: str


class AgentThinking(AgentEvent):
    """The agent is about to call the model."""

    event_name: ClassVar[str] = "agent_thinking"

    iteration: int
    message_count: int
    has_tools: bool


class ToolExecuting(AgentEvent):
    """A tool is about to run."""

    event_name: ClassVar[str] = "tool_executing"

    tool_name: str
    arguments: dict[str, Any] = Field(default_factory=dict)
    tool_call_id: str


class ToolExecuted(AgentEvent):
    """A tool finished (or failed, see ``success``)."""

    event_name: ClassVar[str] = "tool_executed"

    tool_name: str
    result: str
    execution_time: float
    success: bool


class AgentResponding(AgentEvent):
    """The model produced its final answer."""

    event_name: ClassVar[str] = "agent_responding"

    content: str


class AgentCompleted(AgentEvent):
    """A run finished normally, including runs stopped at the iteration cap."""

    event_name: ClassVar[str] = "agent_completed"

    execution_time: float
    tools_executed: int
    iterations: int
    response: AgentResponse


class AgentFailed(AgentEvent):
    """A run was aborted by an exception."""

    event_name: ClassVar[str] = "agent_failed"

    error: str
    error_type: str


# =============================================================================
# Observers
# =============================================================================


class AgentObserver(ABC):
    """
    Receiver of agent lifecycle events.

    ``handle`` may be a plain method or a coroutine. Exceptions raised by an
    observer are logged by the Agent and never change the run.
    """

    @abstractmethod
    def handle(self, event: AgentEvent) -> Optional[Awaitable[None]]:
        """Handle one lifecycle event."""
        ...


class CallbackObserver(AgentObserver):
    """
    Observer delegating to a callable, optionally filtered by event type.

    Example:
        >>> seen = []
        >>> observer = CallbackObserver(seen.append, ToolExecuted)
    """

    def __init__(
        self,
        callback: Callable[[AgentEvent], Union[None, Awaitable[None]]],
        *event_types: type[AgentEvent],
    ) -> None:
        self._callback = callback
        self._event_types = event_types

    def handle(self, event: AgentEvent) -> Optional[Awaitable[None]]:
        if self._event_types and not isinstance(event, self._event_types):
            return None
        return self._callback(event)
