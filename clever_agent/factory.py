"""
Agent Factory - wires settings into ready-to-run agents.

This is the only place that turns configuration into collaborators:

- model adapter via create_model()
- tool registry (explicit tools, the factory registry, or ToolRegistryBuilder)
- a fresh MessageManager per agent with the configured limits
- AgentConfig from the loop settings

Pattern: Factory (composition root for Agent dependencies)
"""

import logging
from typing import Iterable, Optional, Sequence

from clever_agent.agent.agent import Agent
from clever_agent.agent.events import AgentObserver
from clever_agent.core.config import Settings, get_settings
from clever_agent.messages.manager import MessageManager
from clever_agent.models.domain import AgentConfig, AgentResponse
from clever_agent.observability.logging import configure_logging
from clever_agent.providers.base import ModelAdapter, Provider, Transport
from clever_agent.providers.factory import create_model
from clever_agent.tools.base import Tool
from clever_agent.tools.builder import ToolRegistryBuilder
from clever_agent.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


class AgentFactory:
    """
    Factory for building agents from settings.

    Args:
        settings: Application settings (defaults to get_settings()).
        tool_registry: Registry shared by agents created without explicit
            tools. Built lazily from settings when not given.
        observers: Observers attached to every agent created here.
        transport: Transport passed to every model adapter created here.

    Example:
        >>> factory = AgentFactory()
        >>> agent = factory.create_agent("support", provider="anthropic")
        >>> response = await agent.execute("Where is my order?")
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        tool_registry: Optional[ToolRegistry] = None,
        observers: Sequence[AgentObserver] = (),
        transport: Optional[Transport] = None,
    ) -> None:
        self.settings = settings if settings is not None else get_settings()
        configure_logging(level=self.settings.log_level)
        self._tool_registry = tool_registry
        self._observers = list(observers)
        self._transport = transport

    @property
    def tool_registry(self) -> ToolRegistry:
        """Default registry, built from ``Settings.tools`` on first use."""
        if self._tool_registry is None:
            self._tool_registry = ToolRegistryBuilder(self.settings).build()
        return self._tool_registry

    def create_agent(
        self,
        name: str = "default",
        provider: "str | Provider | None" = None,
        model: Optional[str] = None,
        tools: Optional[Iterable[Tool]] = None,
        config: Optional[AgentConfig] = None,
        observers: Optional[Sequence[AgentObserver]] = None,
        adapter: Optional[ModelAdapter] = None,
    ) -> Agent:
        """
        Create an agent.

        Args:
            name: Agent name used on events, logs and metrics.
            provider: Provider name (defaults to ``settings.default_provider``).
            model: Model identifier (defaults to the provider's configured model).
            tools: Explicit tools; when omitted the factory registry is used.
            config: Loop configuration (defaults to the settings values).
            observers: Observers for this agent (defaults to the factory's).
            adapter: Prebuilt model adapter, bypassing provider/model.

        Raises:
            ConfigurationError: Unknown provider or missing API key.
        """
        if adapter is None:
            adapter = create_model(
                provider or self.settings.default_provider,
                self.settings,
                model=model,
                transport=self._transport,
            )

        registry = self._registry_for(tools) if tools is not None else self.tool_registry

        logger.debug("Creating agent %s with %d tool(s)", name, len(registry))
        return Agent(
            model=adapter,
            tools=registry,
            messages=self.create_message_manager(),
            config=config if config is not None else self.default_config(),
            name=name,
            observers=observers if observers is not None else self._observers,
        )

    def with_tools(self, tools: Iterable[Tool]) -> Agent:
        """Create a ``custom`` agent on the default provider with only these tools."""
        return self.create_agent(name="custom", tools=list(tools))

    def with_model(self, provider: "str | Provider", model: Optional[str] = None) -> Agent:
        """Create a ``custom`` agent on a specific provider and model."""
        return self.create_agent(name="custom", provider=provider, model=model)

    async def ask(self, question: str) -> AgentResponse:
        """Answer one question with a fresh default agent."""
        agent = self.create_agent()
        return await agent.execute(question)

    def create_message_manager(self) -> MessageManager:
        """Create an empty history with the configured limits."""
        return MessageManager(
            max_messages=self.settings.max_messages,
            max_tokens=self.settings.history_max_tokens,
        )

    def default_config(self) -> AgentConfig:
        """Build AgentConfig from the loop settings."""
        return AgentConfig(
            max_iterations=self.settings.max_iterations,
            verbose=self.settings.verbose,
            tool_failure_mode=self.settings.tool_failure_mode,
        )

    @staticmethod
    def _registry_for(tools: Iterable[Tool]) -> ToolRegistry:
        registry = ToolRegistry()
        for tool in tools:
            registry.register(tool)
        return registry
