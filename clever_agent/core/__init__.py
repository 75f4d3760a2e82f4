"""
Core module for Clever Agent.

This module contains configuration and the exception hierarchy.
"""

from clever_agent.core.config import Settings, get_settings
from clever_agent.core.exceptions import (
    AuthenticationError,
    CleverAgentException,
    ConfigurationError,
    ErrorCode,
    ModelTransportError,
    RateLimitError,
    ToolExecutionError,
    ToolNotFoundError,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Exceptions
    "ErrorCode",
    "CleverAgentException",
    "ConfigurationError",
    "ModelTransportError",
    "AuthenticationError",
    "RateLimitError",
    "ToolNotFoundError",
    "ToolExecutionError",
]
