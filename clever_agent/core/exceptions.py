"""
Custom exceptions for Clever Agent.

This module provides the exception hierarchy for the agent orchestrator.
All exceptions inherit from CleverAgentException and carry an error code
so callers can branch on the failure kind without parsing messages.

Taxonomy:
- ConfigurationError: unknown provider, missing credential (fatal, raised at construction)
- ModelTransportError: network/decoding failure from a provider adapter
- ToolNotFoundError: registry lookup miss at execution time
- ToolExecutionError: a tool raised while executing

Reaching the iteration cap is NOT an error: the Agent returns a normal
AgentResponse with stopped_reason="max_iterations".
"""

from enum import Enum
from typing import Any


# =============================================================================
# Error Codes Enum
# =============================================================================


class ErrorCode(str, Enum):
    """
    Error codes for Clever Agent exceptions.

    These codes provide a consistent way to identify error types
    in logs, lifecycle events and caller-side handling.
    """

    AGENT_ERROR = "AGENT_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    MODEL_TRANSPORT_ERROR = "MODEL_TRANSPORT_ERROR"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"
    TOOL_NOT_FOUND = "TOOL_NOT_FOUND"
    TOOL_EXECUTION_ERROR = "TOOL_EXECUTION_ERROR"


# =============================================================================
# Base Exception
# =============================================================================


class CleverAgentException(Exception):
    """
    Base exception for all Clever Agent errors.

    Attributes:
        message: Human-readable error message.
        error_code: Machine-readable error code from ErrorCode enum.
    """

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.AGENT_ERROR,
        **kwargs: Any,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            error_code: Machine-readable error code.
            **kwargs: Additional attributes to set on the exception.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code

        for key, value in kwargs.items():
            setattr(self, key, value)


# =============================================================================
# ConfigurationError
# =============================================================================


class ConfigurationError(CleverAgentException):
    """
    Exception for invalid or incomplete configuration.

    Raised immediately when an adapter or agent is constructed with an
    unknown provider name or without the credential it needs. Never retried.

    Attributes:
        provider: Name of the provider involved (if any).
    """

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        error_code: str = ErrorCode.CONFIGURATION_ERROR,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)
        self.provider = provider

    @classmethod
    def missing_api_key(cls, provider: str) -> "ConfigurationError":
        """Create an error for a provider configured without an API key."""
        return cls(
            f"Missing API key for provider: {provider}. "
            f"Set CLEVER_AGENT_{provider.upper()}_API_KEY in your environment.",
            provider=provider,
        )

    @classmethod
    def unknown_provider(cls, provider: str) -> "ConfigurationError":
        """Create an error for a provider name outside the supported set."""
        return cls(
            f"Unknown provider: {provider}. "
            "Supported providers are: openai, anthropic, gemini.",
            provider=provider,
        )


# =============================================================================
# ModelTransportError
# =============================================================================


class ModelTransportError(CleverAgentException):
    """
    Exception for model provider transport issues.

    Raised when communication with an LLM provider fails, including API
    errors, timeouts and undecodable payloads. Always fatal to the current
    Agent.execute() call; the Agent performs no retry of its own.

    Attributes:
        provider: Name of the provider (e.g., "anthropic", "openai").
        status_code: HTTP status code from the provider API (if applicable).
    """

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int | None = None,
        error_code: str = ErrorCode.MODEL_TRANSPORT_ERROR,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)
        self.provider = provider
        self.status_code = status_code

    @classmethod
    def api_error(
        cls, provider: str, message: str, status_code: int | None = None
    ) -> "ModelTransportError":
        """Create an error for a failed provider API call."""
        return cls(
            f"API Error ({provider}): {message}",
            provider=provider,
            status_code=status_code,
        )

    @classmethod
    def invalid_response(cls, provider: str) -> "ModelTransportError":
        """Create an error for a provider payload that could not be decoded."""
        return cls(f"Invalid response from {provider}", provider=provider)


class AuthenticationError(ModelTransportError):
    """Raised when provider credentials are rejected. Never retried."""

    def __init__(self, message: str, provider: str, **kwargs: Any) -> None:
        super().__init__(
            message,
            provider=provider,
            error_code=ErrorCode.AUTHENTICATION_ERROR,
            **kwargs,
        )


class RateLimitError(ModelTransportError):
    """
    Raised when a provider rejects a request for exceeding its rate limit.

    Attributes:
        retry_after: Seconds until the rate limit resets (if known).
    """

    def __init__(
        self,
        message: str,
        provider: str = "unknown",
        retry_after: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            provider=provider,
            error_code=ErrorCode.RATE_LIMIT_ERROR,
            **kwargs,
        )
        self.retry_after = retry_after


# =============================================================================
# Tool Errors
# =============================================================================


class ToolNotFoundError(CleverAgentException):
    """
    Raised when a requested tool is not registered.

    Attributes:
        tool_name: The name that was looked up.
    """

    def __init__(self, tool_name: str) -> None:
        super().__init__(
            f"Tool not found: {tool_name}",
            ErrorCode.TOOL_NOT_FOUND,
        )
        self.tool_name = tool_name


class ToolExecutionError(CleverAgentException):
    """
    Exception for tool execution failures.

    The Agent wraps any exception raised while running a tool into this
    type, keeping the original exception as ``__cause__``.

    Attributes:
        tool_name: Name of the tool that failed.
        arguments: Arguments the tool was invoked with.
        tool_call_id: ID of the originating tool call (for correlation).
    """

    def __init__(
        self,
        message: str,
        tool_name: str,
        arguments: dict[str, Any] | None = None,
        tool_call_id: str | None = None,
        error_code: str = ErrorCode.TOOL_EXECUTION_ERROR,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)
        self.tool_name = tool_name
        self.arguments = arguments if arguments is not None else {}
        self.tool_call_id = tool_call_id
