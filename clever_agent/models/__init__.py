"""Models Package - domain value objects shared by every component."""

from clever_agent.models.domain import (
    MAX_ITERATIONS_MESSAGE,
    AgentConfig,
    AgentResponse,
    Message,
    MessageRole,
    ModelResponse,
    ToolCall,
    ToolFailureMode,
    ToolResult,
)

__all__ = [
    "MAX_ITERATIONS_MESSAGE",
    "AgentConfig",
    "AgentResponse",
    "Message",
    "MessageRole",
    "ModelResponse",
    "ToolCall",
    "ToolFailureMode",
    "ToolResult",
]
