"""
Anthropic Provider - Anthropic Claude messages adapter.

Transforms between the unified OpenAI-style records and the Anthropic
messages API:

- system messages leave the message list; the first one becomes ``system``
- tool definitions flatten to ``{name, description, input_schema}``
- tool result messages become user messages carrying ``tool_result`` blocks
- assistant tool requests become ``tool_use`` blocks
- response ``text`` blocks are concatenated, ``tool_use`` blocks become ToolCalls

Design Patterns:
- Ports and Adapters: AnthropicModel implements ModelAdapter
- Adapter: Transforms unified requests to Anthropic format
- Retry with Exponential Backoff: For rate limit and transient errors
"""

import json
import logging
from typing import Any, Optional, Sequence

from anthropic import AsyncAnthropic

from clever_agent.models.domain import ModelResponse, ToolCall
from clever_agent.providers.base import (
    EMPTY_OBJECT_SCHEMA,
    BaseModelAdapter,
    Provider,
    ToolHandler,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 1024


# =============================================================================
# Anthropic Tool Handler
# =============================================================================


class AnthropicToolHandler(ToolHandler):
    """
    Handler for transforming requests and responses to/from Anthropic format.

    Pattern: Adapter pattern for format transformation

    Example:
        >>> handler = AnthropicToolHandler()
        >>> anthropic_tools = handler.transform_tools(registry.get_definitions())
        >>> response = handler.parse_response(raw)
    """

    provider = Provider.ANTHROPIC

    # =========================================================================
    # Messages
    # =========================================================================

    def extract_system_message(self, messages: Sequence[dict[str, Any]]) -> Optional[str]:
        """Get the content of the first system message, if any."""
        for message in messages:
            if message.get("role") == "system":
                return message.get("content", "")
        return None

    def transform_messages(self, messages: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Transform unified messages to Anthropic format.

        System messages and empty assistant turns are dropped. Consecutive
        tool results merge into a single user message, as Anthropic expects.
        """
        transformed: list[dict[str, Any]] = []

        for message in messages:
            role = message.get("role")
            if role == "system":
                continue

            if role == "tool":
                self._merge_tool_result(transformed, self.format_tool_result(message))
                continue

            if role == "assistant" and message.get("tool_calls"):
                transformed.append(self._transform_assistant_tool_message(message))
                continue

            # Anthropic rejects empty text content
            if role == "assistant" and not message.get("content"):
                continue

            transformed.append({"role": role, "content": message.get("content", "")})

        return transformed

    def format_tool_result(self, tool_message: dict[str, Any]) -> dict[str, Any]:
        """
        Format a tool message as a ``tool_result`` content block.

        Args:
            tool_message: Unified ``{role: tool, content, tool_call_id, name}`` record.
        """
        return {
            "type": "tool_result",
            "tool_use_id": tool_message.get("tool_call_id", ""),
            "content": tool_message.get("content", ""),
        }

    def _merge_tool_result(
        self, transformed: list[dict[str, Any]], block: dict[str, Any]
    ) -> None:
        previous = transformed[-1] if transformed else None
        if (
            previous is not None
            and previous["role"] == "user"
            and isinstance(previous["content"], list)
            and all(item.get("type") == "tool_result" for item in previous["content"])
        ):
            previous["content"].append(block)
        else:
            transformed.append({"role": "user", "content": [block]})

    def _transform_assistant_tool_message(self, message: dict[str, Any]) -> dict[str, Any]:
        blocks: list[dict[str, Any]] = []
        if message.get("content"):
            blocks.append({"type": "text", "text": message["content"]})
        for tool_call in message["tool_calls"]:
            blocks.append(
                {
                    "type": "tool_use",
                    "id": tool_call.get("id", ""),
                    "name": tool_call.get("name", ""),
                    "input": tool_call.get("arguments") or {},
                }
            )
        return {"role": "assistant", "content": blocks}

    # =========================================================================
    # Tool Definitions
    # =========================================================================

    def transform_tool_definition(self, tool_definition: dict[str, Any]) -> dict[str, Any]:
        """
        Transform a single unified tool definition to Anthropic format.

        Returns:
            ``{"name", "description", "input_schema"}``
        """
        function_def = self.function_of(tool_definition)
        return {
            "name": function_def.get("name", ""),
            "description": function_def.get("description", ""),
            "input_schema": function_def.get("parameters") or dict(EMPTY_OBJECT_SCHEMA),
        }

    def transform_tools(self, tool_definitions: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
        """Transform a list of unified tool definitions to Anthropic format."""
        return [self.transform_tool_definition(tool) for tool in tool_definitions]

    def build_payload(
        self,
        messages: Sequence[dict[str, Any]],
        tool_definitions: Sequence[dict[str, Any]],
        model: str,
        params: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """
        Build the messages API request.

        ``max_tokens`` is required by Anthropic and defaults to 1024.
        """
        payload: dict[str, Any] = dict(params or {})
        payload["model"] = model
        payload["messages"] = self.transform_messages(messages)
        payload.setdefault("max_tokens", DEFAULT_MAX_TOKENS)

        system = self.extract_system_message(messages)
        if system is not None:
            payload["system"] = system

        if tool_definitions:
            payload["tools"] = self.transform_tools(tool_definitions)

        return payload

    # =========================================================================
    # Response Parsing
    # =========================================================================

    def extract_text_content(self, content_blocks: list[dict[str, Any]]) -> Optional[str]:
        """
        Concatenate text blocks in order.

        Returns:
            The text, or None when the response has no text block.
        """
        texts = [block.get("text", "") for block in content_blocks if block.get("type") == "text"]
        return "".join(texts) if texts else None

    def parse_tool_use_blocks(self, content_blocks: list[dict[str, Any]]) -> list[ToolCall]:
        """Convert ``tool_use`` blocks to ToolCalls."""
        return [
            ToolCall(
                id=block.get("id", ""),
                name=block.get("name", ""),
                arguments=self._as_arguments(block.get("input")),
            )
            for block in content_blocks
            if block.get("type") == "tool_use"
        ]

    def parse_response(self, raw: dict[str, Any]) -> ModelResponse:
        """Parse an Anthropic messages payload."""
        content_blocks = raw.get("content") or []
        return ModelResponse(
            content=self.extract_text_content(content_blocks),
            tool_calls=self.parse_tool_use_blocks(content_blocks),
            metadata={
                "model": raw.get("model"),
                "usage": raw.get("usage"),
                "finish_reason": raw.get("stop_reason"),
            },
        )

    @staticmethod
    def _as_arguments(value: Any) -> dict[str, Any]:
        if isinstance(value, dict):
            return value
        if isinstance(value, str):
            try:
                decoded = json.loads(value)
            except json.JSONDecodeError:
                return {}
            return decoded if isinstance(decoded, dict) else {}
        return {}


# =============================================================================
# Anthropic Model Adapter
# =============================================================================


class AnthropicModel(BaseModelAdapter):
    """
    Anthropic Claude model adapter.

    Args:
        api_key: Anthropic API key.
        model: Model identifier (default: claude-3-opus-20240229).
        default_params: Generation parameters merged into every request.
        transport: Optional transport replacing the SDK client.
        max_retries: Maximum retry attempts for transient errors.
        retry_delay: Initial delay between retries (exponential backoff).

    Example:
        >>> model = AnthropicModel(api_key="sk-ant-...")
        >>> response = await model.generate(messages, tool_definitions)
    """

    provider = Provider.ANTHROPIC
    handler_class = AnthropicToolHandler
    default_model = "claude-3-opus-20240229"

    def _create_client(self, api_key: str) -> AsyncAnthropic:
        return AsyncAnthropic(api_key=api_key, max_retries=0)

    async def _request(self, payload: dict[str, Any]) -> dict[str, Any]:
        response = await self._client.messages.create(**payload)
        return response.model_dump()
