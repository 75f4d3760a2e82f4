"""
Pytest configuration for the Clever Agent test suite.

This configuration sets up:
- Test markers for categorization
- Shared fixtures built on test doubles (FakeModel, scripted transports)
  rather than network access
"""

import io
import random
from typing import Any, Iterator

import pytest
import structlog

from clever_agent.core.config import Settings
from clever_agent.messages.manager import MessageManager
from clever_agent.models.domain import ModelResponse, ToolCall
from clever_agent.observability.logging import configure_logging, reset_logging
from clever_agent.providers.fake import FakeModel
from clever_agent.tools.base import FunctionTool
from clever_agent.tools.builtin.weather import GetWeatherTool
from clever_agent.tools.registry import ToolRegistry


# =============================================================================
# Test Markers
# =============================================================================


def pytest_configure(config):
    """
    Register custom markers for test categorization.

    - unit: tests for individual components
    - integration: tests wiring several components through the agent loop
    """
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across components")


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    """Settings with credentials for every provider and no tools configured."""
    return Settings(
        openai_api_key="sk-test-openai",
        anthropic_api_key="sk-ant-test",
        gemini_api_key="AIza-test",
        tools=[],
        tool_presets={},
    )


@pytest.fixture
def empty_settings() -> Settings:
    """Settings without any API key."""
    return Settings(
        openai_api_key="",
        anthropic_api_key="",
        gemini_api_key="",
        tools=[],
        tool_presets={},
    )


# =============================================================================
# Tool Fixtures
# =============================================================================


@pytest.fixture
def weather_tool() -> FunctionTool:
    """get_weather tool always returning {"temp": 20}."""
    return FunctionTool(
        name="get_weather",
        description="Get the current weather for a location",
        handler=lambda arguments: {"temp": 20},
        parameters={
            "type": "object",
            "properties": {"location": {"type": "string"}},
            "required": ["location"],
        },
    )


@pytest.fixture
def tool_registry(weather_tool: FunctionTool) -> ToolRegistry:
    """Registry holding the fixed-output get_weather tool."""
    return ToolRegistry().register(weather_tool)


@pytest.fixture
def seeded_weather_tool() -> GetWeatherTool:
    """Built-in weather tool with deterministic output."""
    return GetWeatherTool(rng=random.Random(42))


# =============================================================================
# Model Fixtures
# =============================================================================


def tool_call_response(
    name: str = "get_weather",
    arguments: dict[str, Any] | None = None,
    call_id: str = "call_1",
    content: str | None = None,
) -> ModelResponse:
    """Build a ModelResponse requesting one tool call."""
    return ModelResponse(
        content=content,
        tool_calls=[ToolCall(id=call_id, name=name, arguments=arguments or {"location": "Paris"})],
    )


@pytest.fixture
def fake_model() -> FakeModel:
    """FakeModel with an empty script (answers with its default content)."""
    return FakeModel()


@pytest.fixture
def weather_round_trip_model() -> FakeModel:
    """FakeModel asking for get_weather once, then answering."""
    return FakeModel(
        [
            tool_call_response(),
            ModelResponse(content="It is 20 degrees in Paris.", metadata={"model": "fake"}),
        ]
    )


@pytest.fixture
def message_manager() -> MessageManager:
    """Unbounded conversation history."""
    return MessageManager()


# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture
def log_stream() -> Iterator[io.StringIO]:
    """Route the package's JSON log lines to a buffer at DEBUG level."""
    stream = io.StringIO()
    configure_logging(level="DEBUG", stream=stream, force=True)
    yield stream
    reset_logging()
    structlog.reset_defaults()
