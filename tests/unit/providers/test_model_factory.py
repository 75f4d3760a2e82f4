"""
Unit tests for clever_agent/providers/factory.py - create_model.
"""

import pytest


class TestCreateModel:
    """Tests for create_model."""

    @pytest.mark.parametrize(
        "provider,class_name",
        [("openai", "OpenAIModel"), ("anthropic", "AnthropicModel"), ("gemini", "GeminiModel")],
    )
    def test_creates_adapter_per_provider(self, settings, provider, class_name):
        """Each provider maps to its adapter class."""
        from clever_agent.providers.factory import create_model

        model = create_model(provider, settings)

        assert type(model).__name__ == class_name
        assert model.model == settings.model_for(provider)

    def test_generation_defaults_from_settings(self, settings):
        """temperature and max_tokens come from settings; params override."""
        from clever_agent.providers.factory import create_model

        model = create_model("openai", settings, temperature=0.0, top_p=0.9)

        assert model.default_params == {
            "temperature": 0.0,
            "max_tokens": settings.max_tokens,
            "top_p": 0.9,
        }

    def test_model_override(self, settings):
        """An explicit model wins over the configured one."""
        from clever_agent.providers.factory import create_model

        assert create_model("anthropic", settings, model="claude-3-haiku").model == "claude-3-haiku"

    def test_missing_key_raises(self, empty_settings):
        """No key and no transport is a ConfigurationError."""
        from clever_agent.core.exceptions import ConfigurationError
        from clever_agent.providers.factory import create_model

        with pytest.raises(ConfigurationError, match="Missing API key for provider: gemini"):
            create_model("gemini", empty_settings)

    def test_transport_needs_no_key(self, empty_settings):
        """An injected transport removes the credential requirement."""
        from clever_agent.providers.factory import create_model

        async def transport(payload):
            return {}

        model = create_model("openai", empty_settings, transport=transport)

        assert model._client is None

    def test_unknown_provider(self, settings):
        """Unknown providers raise ConfigurationError."""
        from clever_agent.core.exceptions import ConfigurationError
        from clever_agent.providers.factory import create_model

        with pytest.raises(ConfigurationError):
            create_model("cohere", settings)
