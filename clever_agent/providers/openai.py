"""
OpenAI Provider - OpenAI chat completions adapter.

The unified message and tool records are already OpenAI-shaped, so the
handler is mostly passthrough. The one rewrite is the assistant
``tool_calls`` metadata, which the history stores as flat
``{id, name, arguments}`` records and the API expects in its
``{id, type, function: {name, arguments: <json>}}`` wire form.

Design Patterns:
- Ports and Adapters: OpenAIModel implements ModelAdapter
- Retry with Exponential Backoff: For rate limit and transient errors
- Adapter Pattern: OpenAI SDK responses become ModelResponse
"""

import json
import logging
from typing import Any, Optional, Sequence

from openai import AsyncOpenAI

from clever_agent.models.domain import ModelResponse, ToolCall
from clever_agent.providers.base import (
    BaseModelAdapter,
    Provider,
    ToolHandler,
    Transport,
)

logger = logging.getLogger(__name__)


# =============================================================================
# OpenAI Tool Handler
# =============================================================================


class OpenAIToolHandler(ToolHandler):
    """
    Handler for OpenAI request/response normalization.

    Pattern: Adapter pattern (minimal transformation)

    Example:
        >>> handler = OpenAIToolHandler()
        >>> payload = handler.build_payload(messages, tools, "gpt-4")
        >>> payload["tool_choice"]
        'auto'
    """

    provider = Provider.OPENAI

    def transform_messages(self, messages: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Pass messages through, rewriting flat tool call records.

        Args:
            messages: Unified message records.

        Returns:
            OpenAI format messages.
        """
        transformed = []
        for message in messages:
            message = dict(message)
            tool_calls = message.get("tool_calls")
            if message.get("role") == "assistant" and tool_calls:
                message["tool_calls"] = [self.format_tool_call(tc) for tc in tool_calls]
            transformed.append(message)
        return transformed

    def format_tool_call(self, tool_call: dict[str, Any]) -> dict[str, Any]:
        """Convert a flat ``{id, name, arguments}`` record to the wire form."""
        if "function" in tool_call:
            return tool_call
        arguments = tool_call.get("arguments", {})
        return {
            "id": tool_call.get("id", ""),
            "type": "function",
            "function": {
                "name": tool_call.get("name", ""),
                "arguments": arguments if isinstance(arguments, str) else json.dumps(arguments),
            },
        }

    def transform_tools(self, tool_definitions: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
        """OpenAI format is native - just passthrough."""
        return list(tool_definitions)

    def build_payload(
        self,
        messages: Sequence[dict[str, Any]],
        tool_definitions: Sequence[dict[str, Any]],
        model: str,
        params: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """
        Build the chat completions request.

        ``tool_choice`` is set to ``"auto"`` whenever tools are present.
        """
        payload: dict[str, Any] = {}
        for key, value in (params or {}).items():
            # GPT-5.x models use max_completion_tokens instead of max_tokens
            if key == "max_tokens" and model.startswith("gpt-5"):
                key = "max_completion_tokens"
            payload[key] = value

        payload["model"] = model
        payload["messages"] = self.transform_messages(messages)

        if tool_definitions:
            payload["tools"] = self.transform_tools(tool_definitions)
            payload["tool_choice"] = "auto"

        return payload

    def parse_response(self, raw: dict[str, Any]) -> ModelResponse:
        """
        Parse a chat completions payload.

        Tool call arguments that fail to decode (or decode to something
        other than an object) become an empty dict.
        """
        choice = raw["choices"][0]
        message = choice.get("message") or {}

        tool_calls = [
            self.parse_tool_call(tool_call)
            for tool_call in message.get("tool_calls") or []
        ]

        return ModelResponse(
            content=message.get("content"),
            tool_calls=tool_calls,
            metadata={
                "model": raw.get("model"),
                "usage": raw.get("usage"),
                "finish_reason": choice.get("finish_reason"),
            },
        )

    def parse_tool_call(self, tool_call: dict[str, Any]) -> ToolCall:
        """Parse one ``tool_calls`` entry."""
        function = tool_call.get("function") or {}
        return ToolCall(
            id=tool_call.get("id", ""),
            name=function.get("name", ""),
            arguments=self.decode_arguments(function.get("arguments")),
        )

    @staticmethod
    def decode_arguments(arguments: Any) -> dict[str, Any]:
        """Decode JSON-encoded arguments, falling back to an empty dict."""
        if isinstance(arguments, dict):
            return arguments
        if not isinstance(arguments, str):
            return {}
        try:
            decoded = json.loads(arguments)
        except json.JSONDecodeError:
            logger.warning("Could not decode tool call arguments: %r", arguments)
            return {}
        return decoded if isinstance(decoded, dict) else {}


# =============================================================================
# OpenAI Model Adapter
# =============================================================================


class OpenAIModel(BaseModelAdapter):
    """
    OpenAI GPT model adapter.

    Args:
        api_key: OpenAI API key.
        model: Model identifier (default: gpt-4).
        default_params: Generation parameters merged into every request.
        transport: Optional transport replacing the SDK client.
        base_url: Optional custom endpoint URL (for Azure OpenAI or proxies).
        max_retries: Maximum retry attempts for transient errors.
        retry_delay: Initial delay between retries (exponential backoff).

    Example:
        >>> model = OpenAIModel(api_key="sk-...", default_params={"temperature": 0.7})
        >>> response = await model.generate([{"role": "user", "content": "hello"}])
    """

    provider = Provider.OPENAI
    handler_class = OpenAIToolHandler
    default_model = "gpt-4"

    def __init__(
        self,
        api_key: str = "",
        model: Optional[str] = None,
        default_params: Optional[dict[str, Any]] = None,
        transport: Optional[Transport] = None,
        base_url: Optional[str] = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
    ) -> None:
        self._base_url = base_url
        super().__init__(
            api_key=api_key,
            model=model,
            default_params=default_params,
            transport=transport,
            max_retries=max_retries,
            retry_delay=retry_delay,
        )

    def _create_client(self, api_key: str) -> AsyncOpenAI:
        client_kwargs: dict[str, Any] = {"api_key": api_key, "max_retries": 0}
        if self._base_url:
            client_kwargs["base_url"] = self._base_url
        return AsyncOpenAI(**client_kwargs)

    async def _request(self, payload: dict[str, Any]) -> dict[str, Any]:
        response = await self._client.chat.completions.create(**payload)
        return response.model_dump()
