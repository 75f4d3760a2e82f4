"""Agent Package - the tool-calling loop and its lifecycle events."""

from clever_agent.agent.agent import Agent, AgentState, format_tool_result
from clever_agent.agent.events import (
    AgentCompleted,
    AgentEvent,
    AgentFailed,
    AgentObserver,
    AgentResponding,
    AgentStarted,
    AgentThinking,
    CallbackObserver,
    ToolExecuted,
    ToolExecuting,
)

__all__ = [
    "Agent",
    "AgentState",
    "format_tool_result",
    "AgentEvent",
    "AgentStarted",
    "AgentThinking",
    "ToolExecuting",
    "ToolExecuted",
    "AgentResponding",
    "AgentCompleted",
    "AgentFailed",
    "AgentObserver",
    "CallbackObserver",
]
