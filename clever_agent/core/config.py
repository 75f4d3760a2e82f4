"""
Core configuration module for Clever Agent.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the CLEVER_AGENT_ prefix.

The settings are only read by the wiring layer (AgentFactory, create_model,
ToolRegistryBuilder). The Agent, ToolRegistry and model adapters receive
everything they need through their constructors.
"""

from functools import lru_cache
from typing import Any, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings

SUPPORTED_PROVIDERS = ("openai", "anthropic", "gemini")
TOOL_FAILURE_MODES = ("strict", "lenient")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All fields use the CLEVER_AGENT_ prefix for environment variables.
    Example: CLEVER_AGENT_DEFAULT_PROVIDER=anthropic
    """

    # =========================================================================
    # Provider Selection
    # =========================================================================
    default_provider: str = Field(
        default="openai",
        description="Provider used when none is requested explicitly",
    )

    # =========================================================================
    # Provider API Keys
    # SecretStr masks values in logs/repr, use .get_secret_value() to access
    # =========================================================================
    openai_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="OpenAI API key for GPT models",
    )
    anthropic_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Anthropic API key for Claude models",
    )
    gemini_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Google AI API key for Gemini models",
    )

    # =========================================================================
    # Provider Models
    # =========================================================================
    openai_model: str = Field(default="gpt-4", description="Default OpenAI model")
    anthropic_model: str = Field(
        default="claude-3-opus-20240229",
        description="Default Anthropic model",
    )
    gemini_model: str = Field(
        default="gemini-2.5-flash",
        description="Default Gemini model",
    )

    # =========================================================================
    # Generation Defaults
    # =========================================================================
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature sent to every provider",
    )
    max_tokens: int = Field(
        default=4000,
        ge=1,
        description="Maximum response length requested from the provider",
    )

    # =========================================================================
    # Conversation Limits
    # =========================================================================
    max_messages: Optional[int] = Field(
        default=50,
        ge=1,
        description="Sliding window size for conversation history (None = unlimited)",
    )
    history_max_tokens: Optional[int] = Field(
        default=None,
        ge=1,
        description="Token budget for history; carried but not enforced",
    )

    # =========================================================================
    # Agent Loop
    # =========================================================================
    max_iterations: int = Field(
        default=10,
        ge=1,
        description="Maximum model invocations per execute() call",
    )
    verbose: bool = Field(
        default=False,
        description="Print human-readable progress for each tool call",
    )
    tool_failure_mode: str = Field(
        default="strict",
        description="strict aborts the run on tool failure, lenient feeds the error back",
    )

    # =========================================================================
    # Logging
    # =========================================================================
    log_level: str = Field(default="INFO", description="Level of the clever_agent logger tree")

    # =========================================================================
    # Tools
    # Entries are "package.module:ClassName" or {"package.module:ClassName": {kwargs}}
    # =========================================================================
    tools: list[Any] = Field(
        default_factory=list,
        description="Tools registered on every default agent",
    )
    tool_presets: dict[str, list[Any]] = Field(
        default_factory=dict,
        description="Named tool sets selectable with ToolRegistryBuilder.build(preset)",
    )

    model_config = {
        "env_prefix": "CLEVER_AGENT_",
        "case_sensitive": False,
        "extra": "ignore",
    }

    # =========================================================================
    # Field Validators
    # =========================================================================
    @field_validator("default_provider")
    @classmethod
    def validate_default_provider(cls, v: str) -> str:
        """Validate provider name."""
        v = v.lower()
        if v not in SUPPORTED_PROVIDERS:
            raise ValueError(f"default_provider must be one of: {SUPPORTED_PROVIDERS}")
        return v

    @field_validator("tool_failure_mode")
    @classmethod
    def validate_tool_failure_mode(cls, v: str) -> str:
        """Validate tool failure mode."""
        v = v.lower()
        if v not in TOOL_FAILURE_MODES:
            raise ValueError(f"tool_failure_mode must be one of: {TOOL_FAILURE_MODES}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        v = v.upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {LOG_LEVELS}")
        return v

    def api_key_for(self, provider: str) -> str:
        """
        Get the plain-text API key configured for a provider.

        Args:
            provider: Provider name (openai, anthropic, gemini).

        Returns:
            The API key, or an empty string if none is configured.
        """
        secret: SecretStr | None = getattr(self, f"{provider}_api_key", None)
        return secret.get_secret_value() if secret is not None else ""

    def model_for(self, provider: str) -> str:
        """Get the default model name configured for a provider."""
        return getattr(self, f"{provider}_model")


# =============================================================================
# Settings Singleton
# =============================================================================


@lru_cache
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Uses functools.lru_cache to ensure only one Settings instance is created.

    Returns:
        Settings: The application settings instance.
    """
    return Settings()
