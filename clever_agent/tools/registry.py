"""
Tool Registry - name to tool mapping used by the agent loop.

The registry is the single place the agent looks tools up. Registering a
second tool under an existing name replaces the first one; the tool keeps
its original position in get_definitions(), the way a dict overwrite does.

Pattern: Service Registry (tool inventory with callable handlers)
Pattern: Async-first execution with sync handler support
"""

import inspect
import logging
from typing import Any

from clever_agent.core.exceptions import ToolNotFoundError
from clever_agent.tools.base import Tool, ToolOutput

logger = logging.getLogger(__name__)


class ToolRegistry:
    """
    Registry for managing available tools.

    Attributes:
        _tools: Dictionary mapping tool names to Tool instances.

    Example:
        >>> registry = ToolRegistry().register(GetWeatherTool())
        >>> registry.has("get_weather")
        True
        >>> result = await registry.execute("get_weather", {"location": "Paris"})
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> "ToolRegistry":
        """
        Register a tool under its own name.

        If a tool with the same name exists, it is overwritten.

        Args:
            tool: The Tool instance to register.

        Returns:
            The registry, for chaining.
        """
        if tool.name in self._tools:
            logger.debug("Replacing registered tool: %s", tool.name)
        self._tools[tool.name] = tool
        logger.debug("Registered tool: %s", tool.name)
        return self

    def has(self, name: str) -> bool:
        """Check if a tool is registered."""
        return name in self._tools

    def get(self, name: str) -> Tool:
        """
        Get a registered tool by name.

        Raises:
            ToolNotFoundError: If the tool is not registered.
        """
        if name not in self._tools:
            raise ToolNotFoundError(name)
        return self._tools[name]

    def get_definitions(self) -> list[dict[str, Any]]:
        """
        Get definitions of all registered tools, in registration order.

        Returns:
            List of ``{"type": "function", "function": {...}}`` records,
            suitable for passing to any model adapter.
        """
        return [tool.get_definition() for tool in self._tools.values()]

    def get_tools(self) -> list[Tool]:
        """Get all registered tools, in registration order."""
        return list(self._tools.values())

    def unregister(self, name: str) -> None:
        """
        Remove a tool from the registry.

        Note:
            Does not raise an error if the tool doesn't exist.
        """
        self._tools.pop(name, None)
        logger.debug("Unregistered tool: %s", name)

    async def execute(self, name: str, arguments: dict[str, Any]) -> ToolOutput:
        """
        Execute a registered tool.

        Sync tools are called directly, async tools are awaited. Exceptions
        raised by the tool propagate unchanged.

        Args:
            name: Name of the tool to run.
            arguments: Arguments passed to the tool.

        Returns:
            Whatever the tool returned (ToolResult or raw value).

        Raises:
            ToolNotFoundError: If the tool is not registered.
        """
        tool = self.get(name)
        result = tool.execute(arguments)
        if inspect.isawaitable(result):
            result = await result
        return result

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools
