"""
Domain Models - messages, tool calls, tool results, model and agent responses.

This module contains the immutable value objects that flow through the
agent loop:

- Message: one entry of the conversation history
- ToolCall: a model-issued request to invoke a tool
- ToolResult: the outcome of executing a tool
- ModelResponse: the provider-neutral shape every model adapter returns
- AgentConfig / AgentResponse: agent run configuration and result

Pattern: Domain models as value objects (frozen Pydantic models)
Pattern: Factory methods per message role
"""

import json
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

MessageRole = Literal["user", "assistant", "system", "tool"]

MAX_ITERATIONS_MESSAGE = (
    "Maximum iterations reached. The agent stopped to prevent infinite loops."
)


def to_pretty_json(data: Any) -> str:
    """Serialize structured data the way tool output is fed back to models."""
    return json.dumps(data, indent=4, default=str)


# =============================================================================
# Message Model
# =============================================================================


class Message(BaseModel):
    """
    A message in the conversation.

    Messages are created through the per-role factories and never mutated.
    Role-specific extras live in ``metadata``: ``tool_call_id`` and ``name``
    for tool results, ``tool_calls`` for assistant messages that requested
    tool invocations.

    Attributes:
        role: The role of the message sender (user, assistant, system, tool).
        content: The text content of the message.
        metadata: Role-specific extras, flattened into the record by to_dict().

    Example:
        >>> Message.user("What is the weather in Paris?").to_dict()
        {'role': 'user', 'content': 'What is the weather in Paris?'}
        >>> Message.tool('{"temp": 20}', "call_1", "get_weather").to_dict()
        {'role': 'tool', 'content': '{"temp": 20}', 'tool_call_id': 'call_1', 'name': 'get_weather'}
    """

    role: MessageRole = Field(..., description="Message role")
    content: str = Field(default="", description="Message text content")
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Role-specific extras"
    )

    model_config = {"frozen": True}

    @classmethod
    def user(cls, content: str) -> "Message":
        """Create a user message."""
        return cls(role="user", content=content)

    @classmethod
    def assistant(
        cls, content: str, metadata: Optional[dict[str, Any]] = None
    ) -> "Message":
        """Create an assistant message, optionally carrying its tool calls."""
        return cls(role="assistant", content=content, metadata=dict(metadata or {}))

    @classmethod
    def system(cls, content: str) -> "Message":
        """Create a system message."""
        return cls(role="system", content=content)

    @classmethod
    def tool(cls, content: str, tool_call_id: str, name: str) -> "Message":
        """Create a tool result message."""
        return cls(
            role="tool",
            content=content,
            metadata={"tool_call_id": tool_call_id, "name": name},
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to the provider-agnostic record fed to model adapters.

        Returns:
            ``{"role", "content"}`` with metadata keys merged in.
        """
        record: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.metadata:
            record.update(self.metadata)
        return record


# =============================================================================
# ToolCall Model
# =============================================================================


class ToolCall(BaseModel):
    """
    A request to execute a specific tool with arguments.

    Produced only by parsing a model response.

    Attributes:
        id: Unique identifier for this tool call.
        name: Name of the tool to execute.
        arguments: Arguments to pass to the tool.

    Example:
        >>> ToolCall(id="call_1", name="get_weather", arguments={"location": "Paris"})
    """

    id: str = Field(..., description="Unique tool call identifier")
    name: str = Field(..., description="Name of tool to execute")
    arguments: dict[str, Any] = Field(
        default_factory=dict, description="Arguments for tool"
    )

    model_config = {"frozen": True}

    def to_dict(self) -> dict[str, Any]:
        """Convert to the flat ``{id, name, arguments}`` record."""
        return {"id": self.id, "name": self.name, "arguments": dict(self.arguments)}


# =============================================================================
# ToolResult Model
# =============================================================================


class ToolResult(BaseModel):
    """
    Result of executing a tool.

    Exactly one side is meaningful: ``success=True`` with ``data``, or
    ``success=False`` with ``error``. ``data`` is ignored on failure.

    Attributes:
        data: The result payload.
        success: Whether the execution succeeded.
        error: Error message when execution failed.

    Example:
        >>> ToolResult.ok({"temp": 20}).to_string()
        '{\\n    "temp": 20\\n}'
        >>> ToolResult.failure("city not found").to_string()
        'Error: city not found'
    """

    data: Any = Field(default=None, description="Result payload")
    success: bool = Field(default=True, description="Whether execution succeeded")
    error: Optional[str] = Field(default=None, description="Error message if failed")

    model_config = {"frozen": True}

    @classmethod
    def ok(cls, data: Any) -> "ToolResult":
        """Create a successful result."""
        return cls(data=data, success=True, error=None)

    @classmethod
    def failure(cls, error: str) -> "ToolResult":
        """Create a failed result."""
        return cls(data=None, success=False, error=error)

    def to_string(self) -> str:
        """
        Convert the result to the text fed back to the model.

        Failures render as ``Error: <message>``, strings pass through and
        any other data is pretty-printed JSON.
        """
        if not self.success:
            return f"Error: {self.error}"
        if isinstance(self.data, str):
            return self.data
        return to_pretty_json(self.data)

    def __str__(self) -> str:
        return self.to_string()


# =============================================================================
# ModelResponse Model
# =============================================================================


class ModelResponse(BaseModel):
    """
    Unified response from any model adapter.

    Attributes:
        content: Text content from the model (None when it only called tools).
        tool_calls: Tool calls requested by the model, in model order.
        metadata: Provider-neutral extras: ``model``, ``usage``, ``finish_reason``.
    """

    content: Optional[str] = Field(default=None, description="Text content")
    tool_calls: list[ToolCall] = Field(
        default_factory=list, description="Requested tool calls"
    )
    metadata: dict[str, Any] = Field(default_factory=dict, description="Model metadata")

    model_config = {"frozen": True}

    def has_tool_calls(self) -> bool:
        """Check if the response contains tool calls."""
        return len(self.tool_calls) > 0


# =============================================================================
# Agent Configuration and Response
# =============================================================================


class ToolFailureMode(str, Enum):
    """How the agent reacts when a tool raises."""

    STRICT = "strict"
    LENIENT = "lenient"


class AgentConfig(BaseModel):
    """
    Configuration for one agent.

    Attributes:
        max_iterations: Maximum model invocations per execute() call.
        verbose: Print human-readable progress for each tool call.
        metadata: Free-form caller metadata.
        tool_failure_mode: strict aborts the run on tool failure; lenient
            feeds ``Error: <message>`` back to the model and continues.
    """

    max_iterations: int = Field(default=10, ge=1)
    verbose: bool = Field(default=False)
    metadata: dict[str, Any] = Field(default_factory=dict)
    tool_failure_mode: ToolFailureMode = Field(default=ToolFailureMode.STRICT)

    model_config = {"frozen": True}


class AgentResponse(BaseModel):
    """
    Final result of one Agent.execute() call.

    Attributes:
        content: Final response content.
        metadata: ``iterations``, ``tool_calls`` (log of ``{iteration, tool,
            arguments}``) and either ``model_metadata`` or ``stopped_reason``.
    """

    content: str = Field(..., description="Final response content")
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @property
    def iterations(self) -> int:
        """Get number of iterations used."""
        return self.metadata.get("iterations", 0)

    @property
    def tool_calls(self) -> list[dict[str, Any]]:
        """Get the log of tool calls that were made."""
        return self.metadata.get("tool_calls", [])

    @property
    def stopped_reason(self) -> Optional[str]:
        """Get why the run stopped early, if it did."""
        return self.metadata.get("stopped_reason")

    @property
    def model_metadata(self) -> dict[str, Any]:
        """Get the metadata of the final model response."""
        return self.metadata.get("model_metadata", {})
