"""Model Factory - builds a model adapter from settings.

Tagged choice over the Provider enum. Credentials and default model names
come from Settings; the adapters themselves never read configuration.
"""

import logging
from typing import TYPE_CHECKING, Any, Optional

from clever_agent.core.exceptions import ConfigurationError
from clever_agent.providers.anthropic import AnthropicModel
from clever_agent.providers.base import BaseModelAdapter, Provider, Transport
from clever_agent.providers.gemini import GeminiModel
from clever_agent.providers.openai import OpenAIModel

if TYPE_CHECKING:
    from clever_agent.core.config import Settings

logger = logging.getLogger(__name__)

MODEL_CLASSES: dict[Provider, type[BaseModelAdapter]] = {
    Provider.OPENAI: OpenAIModel,
    Provider.ANTHROPIC: AnthropicModel,
    Provider.GEMINI: GeminiModel,
}


def create_model(
    provider: "str | Provider",
    settings: "Settings",
    model: Optional[str] = None,
    transport: Optional[Transport] = None,
    **params: Any,
) -> BaseModelAdapter:
    """Create a model adapter for a provider.

    Args:
        provider: Provider name or enum member.
        settings: Settings supplying the API key, default model and
            generation defaults (temperature, max_tokens).
        model: Model identifier overriding the configured default.
        transport: Optional transport; when given no API key is required.
        **params: Extra generation parameters overriding the defaults.

    Returns:
        The configured adapter.

    Raises:
        ConfigurationError: If the provider is unknown or has no API key.
    """
    resolved = Provider.parse(provider)
    api_key = settings.api_key_for(resolved.value)
    if not api_key and transport is None:
        raise ConfigurationError.missing_api_key(resolved.value)

    default_params: dict[str, Any] = {
        "temperature": settings.temperature,
        "max_tokens": settings.max_tokens,
    }
    default_params.update(params)

    model_name = model or settings.model_for(resolved.value)
    logger.info("Creating %s model adapter (%s)", resolved.value, model_name)

    return MODEL_CLASSES[resolved](
        api_key=api_key,
        model=model_name,
        default_params=default_params,
        transport=transport,
    )
