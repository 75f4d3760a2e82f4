"""
Clever Agent - provider-agnostic tool-calling LLM agent.

Quick start:

    from clever_agent import AgentFactory

    factory = AgentFactory()
    response = await factory.ask("What's the weather in Paris?")
    print(response.content)
"""

from clever_agent.agent import (
    Agent,
    AgentObserver,
    AgentState,
    CallbackObserver,
)
from clever_agent.core import (
    ConfigurationError,
    ModelTransportError,
    Settings,
    ToolExecutionError,
    ToolNotFoundError,
    get_settings,
)
from clever_agent.factory import AgentFactory
from clever_agent.messages import MessageManager
from clever_agent.models import (
    AgentConfig,
    AgentResponse,
    Message,
    ModelResponse,
    ToolCall,
    ToolFailureMode,
    ToolResult,
)
from clever_agent.providers import FakeModel, ModelAdapter, Provider, create_model
from clever_agent.tools import FunctionTool, Tool, ToolRegistry, ToolRegistryBuilder

__version__ = "1.0.0"

__all__ = [
    "Agent",
    "AgentFactory",
    "AgentObserver",
    "AgentState",
    "CallbackObserver",
    "AgentConfig",
    "AgentResponse",
    "Message",
    "ModelResponse",
    "ToolCall",
    "ToolFailureMode",
    "ToolResult",
    "MessageManager",
    "ModelAdapter",
    "FakeModel",
    "Provider",
    "create_model",
    "Tool",
    "FunctionTool",
    "ToolRegistry",
    "ToolRegistryBuilder",
    "Settings",
    "get_settings",
    "ConfigurationError",
    "ModelTransportError",
    "ToolExecutionError",
    "ToolNotFoundError",
]
