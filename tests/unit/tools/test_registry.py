"""
Unit tests for clever_agent/tools/registry.py and tools/base.py.
"""

import pytest


def make_tool(name="echo", handler=None):
    from clever_agent.tools.base import FunctionTool

    return FunctionTool(name, f"{name} tool", handler or (lambda arguments: arguments))


# =============================================================================
# Tool / FunctionTool
# =============================================================================


class TestToolDefinition:
    """Tests for Tool.get_definition."""

    def test_definition_shape(self, weather_tool):
        """Definitions use the function-calling envelope."""
        definition = weather_tool.get_definition()

        assert definition["type"] == "function"
        assert definition["function"]["name"] == "get_weather"
        assert definition["function"]["description"] == "Get the current weather for a location"
        assert definition["function"]["parameters"]["required"] == ["location"]

    def test_default_parameters_empty_object(self):
        """Tools without a schema advertise an empty object."""
        tool = make_tool()

        assert tool.parameters == {"type": "object", "properties": {}}

    def test_subclass_with_class_attributes(self):
        """name and description may be plain class attributes."""
        from clever_agent.models.domain import ToolResult
        from clever_agent.tools.base import Tool

        class EchoTool(Tool):
            name = "echo"
            description = "Echo text"

            def execute(self, arguments):
                return ToolResult.ok(arguments.get("text", ""))

        tool = EchoTool()
        assert tool.get_definition()["function"]["name"] == "echo"
        assert repr(tool) == "EchoTool(name='echo')"

    def test_tool_without_execute_cannot_be_instantiated(self):
        """execute is abstract."""
        from clever_agent.tools.base import Tool

        class Incomplete(Tool):
            name = "x"
            description = "x"

        with pytest.raises(TypeError):
            Incomplete()


# =============================================================================
# ToolRegistry
# =============================================================================


class TestToolRegistry:
    """Tests for registration and lookup."""

    def test_register_and_get(self, weather_tool):
        """Registered tools can be looked up by name."""
        from clever_agent.tools.registry import ToolRegistry

        registry = ToolRegistry().register(weather_tool)

        assert registry.has("get_weather")
        assert "get_weather" in registry
        assert registry.get("get_weather") is weather_tool
        assert len(registry) == 1

    def test_get_unknown_raises(self):
        """Unknown names raise ToolNotFoundError."""
        from clever_agent.core.exceptions import ToolNotFoundError
        from clever_agent.tools.registry import ToolRegistry

        with pytest.raises(ToolNotFoundError, match="Tool not found: missing"):
            ToolRegistry().get("missing")

    def test_register_overwrites_same_name(self):
        """A second registration under the same name wins."""
        from clever_agent.tools.registry import ToolRegistry

        first, second = make_tool("a"), make_tool("a")
        registry = ToolRegistry().register(first).register(second)

        assert registry.get("a") is second
        assert len(registry.get_definitions()) == 1

    def test_definitions_in_registration_order(self):
        """get_definitions follows registration order."""
        from clever_agent.tools.registry import ToolRegistry

        registry = ToolRegistry()
        for name in ("c", "a", "b"):
            registry.register(make_tool(name))

        names = [d["function"]["name"] for d in registry.get_definitions()]
        assert names == ["c", "a", "b"]
        assert [t.name for t in registry.get_tools()] == ["c", "a", "b"]

    def test_unregister_is_idempotent(self, tool_registry):
        """Unregistering twice does not raise."""
        tool_registry.unregister("get_weather")
        tool_registry.unregister("get_weather")

        assert not tool_registry.has("get_weather")

    def test_empty_registry_has_no_definitions(self):
        """An empty registry yields an empty list."""
        from clever_agent.tools.registry import ToolRegistry

        assert ToolRegistry().get_definitions() == []


class TestToolRegistryExecute:
    """Tests for ToolRegistry.execute."""

    @pytest.mark.asyncio
    async def test_execute_sync_tool(self, tool_registry):
        """Sync handlers are called directly."""
        result = await tool_registry.execute("get_weather", {"location": "Paris"})

        assert result == {"temp": 20}

    @pytest.mark.asyncio
    async def test_execute_async_tool(self):
        """Async handlers are awaited."""
        from clever_agent.tools.registry import ToolRegistry

        async def handler(arguments):
            return arguments["x"] * 2

        registry = ToolRegistry().register(make_tool("double", handler))

        assert await registry.execute("double", {"x": 21}) == 42

    @pytest.mark.asyncio
    async def test_execute_unknown_raises(self):
        """Executing an unknown tool raises ToolNotFoundError."""
        from clever_agent.core.exceptions import ToolNotFoundError
        from clever_agent.tools.registry import ToolRegistry

        with pytest.raises(ToolNotFoundError):
            await ToolRegistry().execute("missing", {})

    @pytest.mark.asyncio
    async def test_execute_propagates_tool_errors(self):
        """Tool exceptions are not swallowed by the registry."""
        from clever_agent.tools.registry import ToolRegistry

        def handler(arguments):
            raise RuntimeError("boom")

        registry = ToolRegistry().register(make_tool("bad", handler))

        with pytest.raises(RuntimeError, match="boom"):
            await registry.execute("bad", {})
