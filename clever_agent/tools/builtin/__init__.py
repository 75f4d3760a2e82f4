"""
Built-in Tools Package - example tools shipped with Clever Agent.

Reference them from configuration as ``clever_agent.tools.builtin:GetWeatherTool``.
"""

from clever_agent.tools.builtin.weather import GetWeatherTool
from clever_agent.tools.registry import ToolRegistry


def register_builtin_tools(registry: ToolRegistry) -> ToolRegistry:
    """
    Register all built-in tools with the given registry.

    Args:
        registry: The ToolRegistry to register tools with.

    Returns:
        The same registry, for chaining.
    """
    return registry.register(GetWeatherTool())


__all__ = ["GetWeatherTool", "register_builtin_tools"]
