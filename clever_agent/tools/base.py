"""
Tool Base - the capability contract every tool implements.

A tool exposes a name, a human-readable description, a JSON Schema for its
parameters and an ``execute(arguments)`` method. ``execute`` may be a plain
function or a coroutine and may return a ToolResult or any raw value; the
agent stringifies whatever comes back before feeding it to the model.

Pattern: Template Method (get_definition built from the abstract accessors)
Pattern: Adapter (FunctionTool wraps a plain callable as a Tool)
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional, Union

from clever_agent.models.domain import ToolResult

EMPTY_PARAMETERS: dict[str, Any] = {"type": "object", "properties": {}}

ToolOutput = Union[ToolResult, Any]
ToolHandler = Callable[[dict[str, Any]], Union[ToolOutput, Awaitable[ToolOutput]]]


class Tool(ABC):
    """
    Abstract base class for tools.

    Subclasses provide ``name`` and ``description`` (as class attributes or
    properties), optionally override ``parameters``, and implement
    ``execute``.

    Example:
        >>> class EchoTool(Tool):
        ...     name = "echo"
        ...     description = "Echo the given text"
        ...
        ...     def execute(self, arguments):
        ...         return ToolResult.ok(arguments.get("text", ""))
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique tool name the model uses to call it."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """What the tool does, shown to the model."""
        pass

    @property
    def parameters(self) -> dict[str, Any]:
        """JSON Schema describing the tool arguments."""
        return dict(EMPTY_PARAMETERS)

    @abstractmethod
    def execute(self, arguments: dict[str, Any]) -> Union[ToolOutput, Awaitable[ToolOutput]]:
        """
        Execute the tool.

        Args:
            arguments: Arguments decoded from the model's tool call.

        Returns:
            A ToolResult, a raw value, or an awaitable of either.
        """
        pass

    def get_definition(self) -> dict[str, Any]:
        """
        Get the tool definition in the function-calling format.

        Returns:
            ``{"type": "function", "function": {name, description, parameters}}``
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class FunctionTool(Tool):
    """
    Tool backed by a plain (sync or async) callable.

    Args:
        name: Tool name.
        description: Tool description.
        handler: Callable receiving the arguments dict.
        parameters: JSON Schema for the arguments (defaults to an empty object).

    Example:
        >>> async def lookup(arguments):
        ...     return {"temp": 20}
        >>> tool = FunctionTool("get_weather", "Get weather", lookup)
    """

    def __init__(
        self,
        name: str,
        description: str,
        handler: ToolHandler,
        parameters: Optional[dict[str, Any]] = None,
    ) -> None:
        self._name = name
        self._description = description
        self._handler = handler
        self._parameters = parameters if parameters is not None else dict(EMPTY_PARAMETERS)

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def parameters(self) -> dict[str, Any]:
        return self._parameters

    def execute(self, arguments: dict[str, Any]) -> Union[ToolOutput, Awaitable[ToolOutput]]:
        return self._handler(arguments)
