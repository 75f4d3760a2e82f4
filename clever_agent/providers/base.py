"""
Model Adapter Base - the provider-neutral contract the agent depends on.

The agent needs exactly one operation from a model:

    await model.generate(messages, tool_definitions) -> ModelResponse

Every concrete adapter splits that operation into four steps:

1. transform the unified message records into the provider request shape
2. transform the unified tool definitions into the provider tool shape
3. send the payload through a transport (``async (payload) -> dict``)
4. parse the raw provider payload into a ModelResponse

Steps 1, 2 and 4 are pure and live on a ToolHandler so they can be tested
without any transport. Step 3 defaults to the provider SDK (or httpx for
Gemini) wrapped in retry with exponential backoff, and can be replaced by
any injected transport.

Design Pattern:
- Ports and Adapters: ModelAdapter is the port, provider adapters are adapters
- Template Method: BaseModelAdapter.generate() drives the handler steps
- Retry with Exponential Backoff: only on the default transport
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Sequence

from clever_agent.core.exceptions import (
    AuthenticationError,
    CleverAgentException,
    ConfigurationError,
    ModelTransportError,
    RateLimitError,
)
from clever_agent.models.domain import ModelResponse

logger = logging.getLogger(__name__)

Transport = Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]

EMPTY_OBJECT_SCHEMA: dict[str, Any] = {"type": "object", "properties": {}}


# =============================================================================
# Provider Enum
# =============================================================================


class Provider(str, Enum):
    """Supported model providers."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"

    @classmethod
    def parse(cls, value: "str | Provider") -> "Provider":
        """
        Resolve a provider name.

        Raises:
            ConfigurationError: If the name is not a supported provider.
        """
        if isinstance(value, Provider):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise ConfigurationError.unknown_provider(str(value)) from e


# =============================================================================
# Tool Handler (pure normalization)
# =============================================================================


class ToolHandler(ABC):
    """
    Pure request/response normalization for one provider.

    Handlers never perform I/O. Inputs are the unified records produced by
    ``Message.to_dict()`` and ``Tool.get_definition()``.
    """

    provider: Provider

    @abstractmethod
    def transform_messages(self, messages: Sequence[dict[str, Any]]) -> Any:
        """Transform unified message records into the provider shape."""
        ...

    @abstractmethod
    def transform_tools(self, tool_definitions: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
        """Transform unified tool definitions into the provider shape."""
        ...

    @abstractmethod
    def build_payload(
        self,
        messages: Sequence[dict[str, Any]],
        tool_definitions: Sequence[dict[str, Any]],
        model: str,
        params: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Build the full request payload for one generate() call."""
        ...

    @abstractmethod
    def parse_response(self, raw: dict[str, Any]) -> ModelResponse:
        """Parse a raw provider payload into a ModelResponse."""
        ...

    @staticmethod
    def function_of(tool_definition: dict[str, Any]) -> dict[str, Any]:
        """Get the ``function`` body of a unified tool definition."""
        return tool_definition.get("function", tool_definition)


# =============================================================================
# ModelAdapter Port
# =============================================================================


class ModelAdapter(ABC):
    """
    Abstract base class for model adapters.

    Example:
        >>> response = await model.generate(
        ...     [{"role": "user", "content": "hello"}],
        ...     registry.get_definitions(),
        ... )
        >>> response.has_tool_calls()
        False
    """

    @abstractmethod
    async def generate(
        self,
        messages: Sequence[dict[str, Any]],
        tool_definitions: Optional[Sequence[dict[str, Any]]] = None,
    ) -> ModelResponse:
        """
        Ask the model for its next response.

        Args:
            messages: Conversation history as flat ``{role, content, ...}`` records.
            tool_definitions: Tool definitions in the function-calling format.

        Returns:
            ModelResponse with content and/or tool calls.

        Raises:
            ModelTransportError: If the provider call fails or returns an
                undecodable payload.
        """
        ...


# =============================================================================
# Transport-backed Adapter
# =============================================================================


class BaseModelAdapter(ModelAdapter):
    """
    Adapter that runs a ToolHandler over a transport.

    Subclasses set ``provider``, ``handler_class`` and ``default_model`` and
    implement ``_create_client`` and ``_request`` (one attempt against the
    real API). Passing ``transport`` bypasses the client, the credential
    check and the retry loop entirely.

    Args:
        api_key: Provider credential. Required unless ``transport`` is given.
        model: Model identifier (defaults to ``default_model``).
        default_params: Generation parameters (temperature, max_tokens, ...).
        transport: Optional ``async (payload) -> dict`` replacing the client.
        max_retries: Maximum attempts for transient errors.
        retry_delay: Initial delay between retries (exponential backoff).
    """

    provider: Provider
    handler_class: type[ToolHandler]
    default_model: str

    def __init__(
        self,
        api_key: str = "",
        model: Optional[str] = None,
        default_params: Optional[dict[str, Any]] = None,
        transport: Optional[Transport] = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
    ) -> None:
        self.model = model or self.default_model
        self.default_params = dict(default_params or {})
        self.handler = self.handler_class()
        self._max_retries = max(1, max_retries)
        self._retry_delay = retry_delay
        self._client: Any = None

        if transport is not None:
            self._transport: Transport = transport
        else:
            if not api_key:
                raise ConfigurationError.missing_api_key(self.provider.value)
            self._api_key = api_key
            self._client = self._create_client(api_key)
            self._transport = self._default_transport

    @property
    def provider_name(self) -> str:
        """Provider identifier, e.g. "openai"."""
        return self.provider.value

    async def generate(
        self,
        messages: Sequence[dict[str, Any]],
        tool_definitions: Optional[Sequence[dict[str, Any]]] = None,
    ) -> ModelResponse:
        """Transform, send, parse. See ModelAdapter.generate()."""
        payload = self.handler.build_payload(
            messages, tool_definitions or [], self.model, self.default_params
        )
        raw = await self._send(payload)
        try:
            return self.handler.parse_response(raw)
        except (KeyError, IndexError, TypeError, AttributeError, ValueError) as e:
            raise ModelTransportError.invalid_response(self.provider_name) from e

    async def aclose(self) -> None:
        """Release the underlying client, if any."""
        close = getattr(self._client, "aclose", None) or getattr(self._client, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "BaseModelAdapter":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    # =========================================================================
    # Transport
    # =========================================================================

    async def _send(self, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            raw = await self._transport(payload)
        except CleverAgentException:
            raise
        except Exception as e:
            raise ModelTransportError.api_error(self.provider_name, str(e)) from e

        if not isinstance(raw, dict):
            raise ModelTransportError.invalid_response(self.provider_name)
        return raw

    async def _default_transport(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._execute_with_retry(self._request, payload)

    @abstractmethod
    def _create_client(self, api_key: str) -> Any:
        """Create the provider client used by the default transport."""
        ...

    @abstractmethod
    async def _request(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Perform one request against the provider API."""
        ...

    # =========================================================================
    # Retry Logic with Exponential Backoff
    # =========================================================================

    async def _execute_with_retry(
        self,
        func: Callable[[dict[str, Any]], Awaitable[dict[str, Any]]],
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Execute a request with retry logic and exponential backoff.

        Returns:
            The raw response payload.

        Raises:
            AuthenticationError: Immediately on auth errors (no retry).
            RateLimitError: When retries exhausted on rate limit.
            ModelTransportError: On other errors after retry exhaustion.
        """
        last_error: Optional[ModelTransportError] = None

        for attempt in range(self._max_retries):
            try:
                return await func(payload)
            except AuthenticationError:
                raise
            except ModelTransportError as e:
                last_error = e
            except Exception as e:
                error = self._classify_error(e)
                if isinstance(error, AuthenticationError):
                    raise error from e
                last_error = error

            logger.warning(
                "%s request failed (attempt %d/%d): %s",
                self.provider_name,
                attempt + 1,
                self._max_retries,
                last_error,
            )
            if attempt < self._max_retries - 1:
                delay = self._retry_delay * (2**attempt)
                await asyncio.sleep(delay)

        if isinstance(last_error, RateLimitError):
            raise last_error
        raise ModelTransportError(
            f"Request failed after {self._max_retries} attempts: {last_error}",
            provider=self.provider_name,
            status_code=last_error.status_code if last_error else None,
        ) from last_error

    def _classify_error(self, e: Exception) -> ModelTransportError:
        """
        Map an SDK or HTTP exception onto the transport error taxonomy.

        Uses the HTTP status when the exception carries one, otherwise
        falls back to matching the message text.
        """
        status_code = getattr(e, "status_code", None)
        if status_code is None:
            response = getattr(e, "response", None)
            status_code = getattr(response, "status_code", None)
        error_lower = str(e).lower()

        if status_code in (401, 403) or (
            status_code is None
            and (
                "authentication" in error_lower
                or "api key" in error_lower
                or "unauthorized" in error_lower
                or "invalid_api_key" in error_lower
            )
        ):
            return AuthenticationError(str(e), provider=self.provider_name)

        if status_code == 429 or "rate limit" in error_lower:
            return RateLimitError(str(e), provider=self.provider_name)

        return ModelTransportError.api_error(self.provider_name, str(e), status_code)
