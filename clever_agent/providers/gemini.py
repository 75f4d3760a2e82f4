"""
Gemini Provider - Google Generative AI adapter.

Transforms between the unified OpenAI-style records and the Gemini
``generateContent`` API:

- ``assistant`` becomes ``model``; system messages are dropped
- consecutive tool messages become one user turn of ``functionResponse`` parts
- tool definitions are wrapped as ``functionDeclarations``
- ``functionCall`` parts become ToolCalls with a generated ``<name>_<hex>`` id

The default transport posts JSON with httpx; Google's API does not assign
ids to function calls.

Design Patterns:
- Ports and Adapters: GeminiModel implements ModelAdapter
- Adapter: Transforms unified requests to Gemini format
- Retry with Exponential Backoff: Handles transient errors
"""

import json
import logging
import uuid
from typing import Any, Optional, Sequence

import httpx

from clever_agent.core.exceptions import (
    AuthenticationError,
    ModelTransportError,
    RateLimitError,
)
from clever_agent.models.domain import ModelResponse, ToolCall
from clever_agent.providers.base import (
    BaseModelAdapter,
    Provider,
    ToolHandler,
    Transport,
)

logger = logging.getLogger(__name__)

# Default API base URL
GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"

# Unified generation params to Gemini generationConfig keys
GENERATION_CONFIG_KEYS = {
    "max_tokens": "maxOutputTokens",
    "temperature": "temperature",
    "top_p": "topP",
    "top_k": "topK",
    "stop": "stopSequences",
}


# =============================================================================
# Gemini Tool Handler
# =============================================================================


class GeminiToolHandler(ToolHandler):
    """
    Handler for transforming requests and responses to/from Gemini format.

    Pattern: Adapter pattern for format transformation

    Example:
        >>> handler = GeminiToolHandler()
        >>> handler.transform_messages([{"role": "assistant", "content": "hi"}])
        [{'role': 'model', 'parts': [{'text': 'hi'}]}]
    """

    provider = Provider.GEMINI

    # =========================================================================
    # Messages
    # =========================================================================

    def transform_messages(self, messages: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Transform unified messages to Gemini contents.

        Unified format:
            [{"role": "user", "content": "Hello"}, {"role": "assistant", "content": "Hi"}]

        Gemini format:
            [{"role": "user", "parts": [{"text": "Hello"}]},
             {"role": "model", "parts": [{"text": "Hi"}]}]
        """
        contents: list[dict[str, Any]] = []

        for message in messages:
            role = message.get("role", "user")
            content = message.get("content") or ""

            if role == "system":
                continue

            if role == "tool":
                self._merge_function_response(contents, self.format_function_response(message))
                continue

            gemini_role = "model" if role == "assistant" else "user"
            parts: list[dict[str, Any]] = []
            tool_calls = message.get("tool_calls") if role == "assistant" else None
            if content or not tool_calls:
                parts.append({"text": content})
            if tool_calls:
                parts.extend(self._transform_tool_calls(tool_calls))
            contents.append({"role": gemini_role, "parts": parts})

        return contents

    def format_function_response(self, tool_message: dict[str, Any]) -> dict[str, Any]:
        """
        Format a tool message as a ``functionResponse`` user turn.

        The result is the JSON-decoded content when it decodes, else the raw
        string.
        """
        content = tool_message.get("content") or ""
        try:
            result = json.loads(content)
        except (json.JSONDecodeError, TypeError):
            result = content
        if result is None:
            result = content

        return {
            "role": "user",
            "parts": [
                {
                    "functionResponse": {
                        "name": tool_message.get("name", ""),
                        "response": {"result": result},
                    }
                }
            ],
        }

    def _merge_function_response(
        self, contents: list[dict[str, Any]], turn: dict[str, Any]
    ) -> None:
        # Gemini wants one user turn answering every functionCall of the model turn
        previous = contents[-1] if contents else None
        if (
            previous is not None
            and previous["role"] == "user"
            and all("functionResponse" in part for part in previous["parts"])
        ):
            previous["parts"].extend(turn["parts"])
        else:
            contents.append(turn)

    def _transform_tool_calls(self, tool_calls: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Transform flat tool call records to Gemini functionCall parts."""
        return [
            {
                "functionCall": {
                    "name": tool_call.get("name", ""),
                    "args": tool_call.get("arguments") or {},
                }
            }
            for tool_call in tool_calls
        ]

    # =========================================================================
    # Tool Definitions
    # =========================================================================

    def transform_tool_definition(self, tool_definition: dict[str, Any]) -> dict[str, Any]:
        """
        Transform a single unified tool definition to a function declaration.

        Returns:
            ``{"name", "description", "parameters"}``
        """
        function_def = self.function_of(tool_definition)
        return {
            "name": function_def.get("name", ""),
            "description": function_def.get("description", ""),
            "parameters": function_def.get("parameters") or {},
        }

    def transform_tools(self, tool_definitions: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Transform unified tool definitions to Gemini tools.

        Returns:
            ``[{"functionDeclarations": [...]}]``
        """
        declarations = [self.transform_tool_definition(tool) for tool in tool_definitions]
        return [{"functionDeclarations": declarations}]

    def build_payload(
        self,
        messages: Sequence[dict[str, Any]],
        tool_definitions: Sequence[dict[str, Any]],
        model: str,
        params: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """
        Build the generateContent request body.

        The model is part of the URL, not the body. Unified generation
        params are mapped into ``generationConfig``.
        """
        payload: dict[str, Any] = {"contents": self.transform_messages(messages)}

        generation_config = {
            GENERATION_CONFIG_KEYS.get(key, key): value
            for key, value in (params or {}).items()
            if value is not None
        }
        if generation_config:
            payload["generationConfig"] = generation_config

        if tool_definitions:
            payload["tools"] = self.transform_tools(tool_definitions)

        return payload

    # =========================================================================
    # Response Parsing
    # =========================================================================

    def extract_text_content(self, parts: list[dict[str, Any]]) -> Optional[str]:
        """
        Concatenate text parts in order.

        Returns:
            The text, or None when no part carries text.
        """
        texts = [part["text"] for part in parts if "text" in part]
        return "".join(texts) if texts else None

    def parse_function_calls(self, parts: list[dict[str, Any]]) -> list[ToolCall]:
        """Convert ``functionCall`` parts to ToolCalls with generated ids."""
        tool_calls = []
        for part in parts:
            if "functionCall" not in part:
                continue
            function_call = part["functionCall"]
            name = function_call.get("name", "")
            args = function_call.get("args")
            tool_calls.append(
                ToolCall(
                    id=f"{name}_{uuid.uuid4().hex[:13]}",
                    name=name,
                    arguments=args if isinstance(args, dict) else {},
                )
            )
        return tool_calls

    def parse_response(self, raw: dict[str, Any]) -> ModelResponse:
        """Parse a generateContent payload (first candidate only)."""
        candidates = raw.get("candidates") or [{}]
        candidate = candidates[0]
        parts = (candidate.get("content") or {}).get("parts") or []

        return ModelResponse(
            content=self.extract_text_content(parts),
            tool_calls=self.parse_function_calls(parts),
            metadata={
                "model": raw.get("modelVersion"),
                "usage": raw.get("usageMetadata"),
                "finish_reason": candidate.get("finishReason"),
            },
        )


# =============================================================================
# Gemini Model Adapter
# =============================================================================


class GeminiModel(BaseModelAdapter):
    """
    Google Gemini model adapter.

    Args:
        api_key: Google AI API key.
        model: Model identifier (default: gemini-2.5-flash).
        default_params: Generation parameters mapped into generationConfig.
        transport: Optional transport replacing the httpx client.
        api_base: API base URL (default: Google's API).
        timeout: HTTP timeout in seconds.
        max_retries: Maximum retry attempts for transient errors.
        retry_delay: Initial delay between retries (exponential backoff).

    Example:
        >>> async with GeminiModel(api_key="AIza...") as model:
        ...     response = await model.generate(messages)
    """

    provider = Provider.GEMINI
    handler_class = GeminiToolHandler
    default_model = "gemini-2.5-flash"

    def __init__(
        self,
        api_key: str = "",
        model: Optional[str] = None,
        default_params: Optional[dict[str, Any]] = None,
        transport: Optional[Transport] = None,
        api_base: Optional[str] = None,
        timeout: float = 60.0,
        max_retries: int = 3,
        retry_delay: float = 1.0,
    ) -> None:
        self._api_base = (api_base or GEMINI_API_BASE).rstrip("/")
        self._timeout = timeout
        super().__init__(
            api_key=api_key,
            model=model,
            default_params=default_params,
            transport=transport,
            max_retries=max_retries,
            retry_delay=retry_delay,
        )

    @property
    def url(self) -> str:
        """generateContent endpoint for the configured model."""
        return f"{self._api_base}/models/{self.model}:generateContent"

    def _create_client(self, api_key: str) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._timeout,
            headers={"x-goog-api-key": api_key, "Content-Type": "application/json"},
        )

    async def _request(self, payload: dict[str, Any]) -> dict[str, Any]:
        response = await self._client.post(self.url, json=payload)
        if response.status_code != 200:
            self._handle_error_response(response.status_code, response.text)
        try:
            return response.json()
        except ValueError as e:
            raise ModelTransportError.invalid_response(self.provider_name) from e

    def _handle_error_response(self, status_code: int, error_text: str) -> None:
        """
        Handle HTTP error responses from Gemini API.

        Raises:
            AuthenticationError: For 401/403 errors.
            RateLimitError: For 429 errors.
            ModelTransportError: For other errors.
        """
        if status_code in (401, 403):
            raise AuthenticationError(
                f"Authentication failed: {error_text}",
                provider=self.provider_name,
                status_code=status_code,
            )

        if status_code == 429:
            raise RateLimitError(
                f"Rate limit exceeded: {error_text}",
                provider=self.provider_name,
                status_code=status_code,
            )

        raise ModelTransportError.api_error(self.provider_name, error_text, status_code)
