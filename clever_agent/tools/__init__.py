"""
Tools Package - tool contract, registry and configuration-driven builder.
"""

from clever_agent.core.exceptions import ToolNotFoundError
from clever_agent.tools.base import FunctionTool, Tool, ToolResult
from clever_agent.tools.builder import ToolRegistryBuilder
from clever_agent.tools.registry import ToolRegistry

__all__ = [
    "Tool",
    "FunctionTool",
    "ToolResult",
    "ToolRegistry",
    "ToolRegistryBuilder",
    "ToolNotFoundError",
]
