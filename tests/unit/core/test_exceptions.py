"""
Unit tests for clever_agent/core/exceptions.py - exception hierarchy.

Every exception carries an error_code so callers and lifecycle events can
branch on the failure kind without parsing messages.
"""

import pytest


# =============================================================================
# Base Exception
# =============================================================================


class TestCleverAgentException:
    """Tests for the CleverAgentException base class."""

    def test_base_exception_has_message(self):
        """str() returns the message."""
        from clever_agent.core.exceptions import CleverAgentException

        exc = CleverAgentException("test message")
        assert str(exc) == "test message"
        assert exc.message == "test message"

    def test_base_exception_has_default_error_code(self):
        """Default error code is AGENT_ERROR."""
        from clever_agent.core.exceptions import CleverAgentException, ErrorCode

        exc = CleverAgentException("test")
        assert exc.error_code == ErrorCode.AGENT_ERROR

    def test_base_exception_accepts_extra_attributes(self):
        """Keyword arguments become attributes."""
        from clever_agent.core.exceptions import CleverAgentException

        exc = CleverAgentException("test", agent="support")
        assert exc.agent == "support"

    @pytest.mark.parametrize(
        "exc_name",
        [
            "ConfigurationError",
            "ModelTransportError",
            "AuthenticationError",
            "RateLimitError",
            "ToolNotFoundError",
            "ToolExecutionError",
        ],
    )
    def test_all_exceptions_inherit_from_base(self, exc_name):
        """Every library exception derives from CleverAgentException."""
        from clever_agent.core import exceptions

        assert issubclass(getattr(exceptions, exc_name), exceptions.CleverAgentException)


# =============================================================================
# ConfigurationError
# =============================================================================


class TestConfigurationError:
    """Tests for ConfigurationError and its factories."""

    def test_missing_api_key_names_provider_and_env_var(self):
        """missing_api_key points at the environment variable to set."""
        from clever_agent.core.exceptions import ConfigurationError, ErrorCode

        exc = ConfigurationError.missing_api_key("gemini")

        assert exc.provider == "gemini"
        assert exc.error_code == ErrorCode.CONFIGURATION_ERROR
        assert "CLEVER_AGENT_GEMINI_API_KEY" in str(exc)

    def test_unknown_provider_lists_supported(self):
        """unknown_provider mentions the offending name."""
        from clever_agent.core.exceptions import ConfigurationError

        exc = ConfigurationError.unknown_provider("mistral")

        assert exc.provider == "mistral"
        assert str(exc).startswith("Unknown provider: mistral")


# =============================================================================
# ModelTransportError
# =============================================================================


class TestModelTransportError:
    """Tests for ModelTransportError and its subclasses."""

    def test_api_error_format(self):
        """api_error formats provider and message and keeps the status."""
        from clever_agent.core.exceptions import ModelTransportError

        exc = ModelTransportError.api_error("openai", "boom", status_code=500)

        assert str(exc) == "API Error (openai): boom"
        assert exc.provider == "openai"
        assert exc.status_code == 500

    def test_invalid_response_format(self):
        """invalid_response names the provider."""
        from clever_agent.core.exceptions import ModelTransportError

        exc = ModelTransportError.invalid_response("anthropic")

        assert str(exc) == "Invalid response from anthropic"
        assert exc.status_code is None

    def test_authentication_error_is_transport_error(self):
        """AuthenticationError is a ModelTransportError with its own code."""
        from clever_agent.core.exceptions import (
            AuthenticationError,
            ErrorCode,
            ModelTransportError,
        )

        exc = AuthenticationError("bad key", provider="openai")

        assert isinstance(exc, ModelTransportError)
        assert exc.error_code == ErrorCode.AUTHENTICATION_ERROR

    def test_rate_limit_error_has_retry_after(self):
        """RateLimitError carries retry_after."""
        from clever_agent.core.exceptions import ErrorCode, RateLimitError

        exc = RateLimitError("slow down", provider="gemini", retry_after=30)

        assert exc.retry_after == 30
        assert exc.error_code == ErrorCode.RATE_LIMIT_ERROR


# =============================================================================
# Tool Exceptions
# =============================================================================


class TestToolExceptions:
    """Tests for ToolNotFoundError and ToolExecutionError."""

    def test_tool_not_found_message(self):
        """Message is 'Tool not found: <name>'."""
        from clever_agent.core.exceptions import ErrorCode, ToolNotFoundError

        exc = ToolNotFoundError("search")

        assert str(exc) == "Tool not found: search"
        assert exc.tool_name == "search"
        assert exc.error_code == ErrorCode.TOOL_NOT_FOUND

    def test_tool_execution_error_attributes(self):
        """ToolExecutionError keeps tool name, arguments and call id."""
        from clever_agent.core.exceptions import ToolExecutionError

        exc = ToolExecutionError(
            "failed",
            tool_name="get_weather",
            arguments={"location": "Paris"},
            tool_call_id="call_1",
        )

        assert exc.tool_name == "get_weather"
        assert exc.arguments == {"location": "Paris"}
        assert exc.tool_call_id == "call_1"

    def test_tool_execution_error_defaults_arguments(self):
        """Arguments default to an empty dict."""
        from clever_agent.core.exceptions import ToolExecutionError

        exc = ToolExecutionError("failed", tool_name="get_weather")

        assert exc.arguments == {}
        assert exc.tool_call_id is None
