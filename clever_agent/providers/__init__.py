"""
Providers Package - Model Adapters

This package contains the provider-neutral ModelAdapter contract, the pure
per-provider tool handlers that normalize requests and responses, the
transport-backed adapters for OpenAI, Anthropic and Gemini, and FakeModel.
"""

from clever_agent.core.exceptions import (
    AuthenticationError,
    ModelTransportError,
    RateLimitError,
)
from clever_agent.providers.anthropic import AnthropicModel, AnthropicToolHandler
from clever_agent.providers.base import (
    BaseModelAdapter,
    ModelAdapter,
    Provider,
    ToolHandler,
    Transport,
)
from clever_agent.providers.factory import create_model
from clever_agent.providers.fake import FakeModel
from clever_agent.providers.gemini import GeminiModel, GeminiToolHandler
from clever_agent.providers.openai import OpenAIModel, OpenAIToolHandler

__all__ = [
    "ModelAdapter",
    "BaseModelAdapter",
    "Provider",
    "ToolHandler",
    "Transport",
    "OpenAIModel",
    "OpenAIToolHandler",
    "AnthropicModel",
    "AnthropicToolHandler",
    "GeminiModel",
    "GeminiToolHandler",
    "FakeModel",
    "create_model",
    "ModelTransportError",
    "AuthenticationError",
    "RateLimitError",
]
