"""
Fake Model - test double implementing the ModelAdapter contract.

FakeModel has real behavior rather than mock expectations: it replays a
scripted queue of responses (or delegates to a callable) and records every
call it receives. It needs no credentials and makes no network calls, so it
also serves local development and demos.

Pattern: FakeRepository-style test double for the ModelAdapter port
"""

import copy
import inspect
from collections import deque
from typing import Any, Awaitable, Callable, Iterable, Optional, Sequence, Union

from clever_agent.models.domain import ModelResponse
from clever_agent.providers.base import ModelAdapter

ScriptItem = Union[ModelResponse, Exception]
Responder = Callable[
    [list[dict[str, Any]], list[dict[str, Any]]],
    Union[ModelResponse, Awaitable[ModelResponse]],
]


class FakeModel(ModelAdapter):
    """
    Fake model for testing and local development.

    Attributes:
        calls: One ``{"messages", "tool_definitions"}`` record per generate()
            call, with deep copies of what the model was given.
        response_content: Content returned once the script is exhausted.

    Example:
        >>> model = FakeModel([
        ...     ModelResponse(tool_calls=[ToolCall(id="call_1", name="get_weather",
        ...                                        arguments={"location": "Paris"})]),
        ...     ModelResponse(content="It is 20 degrees in Paris."),
        ... ])
        >>> response = await model.generate([{"role": "user", "content": "weather?"}])
        >>> response.has_tool_calls()
        True

        # Scripted errors are raised instead of returned:
        >>> model = FakeModel([ModelTransportError("boom", provider="fake")])
    """

    def __init__(
        self,
        responses: Optional[Iterable[ScriptItem]] = None,
        responder: Optional[Responder] = None,
        response_content: str = "Fake response for testing",
    ) -> None:
        """
        Initialize the fake model.

        Args:
            responses: Scripted responses (or exceptions) returned in order.
            responder: Callable consulted when the script is empty.
            response_content: Content of the default response.
        """
        self._script: deque[ScriptItem] = deque(responses or [])
        self._responder = responder
        self.response_content = response_content
        self.calls: list[dict[str, Any]] = []

    @property
    def call_count(self) -> int:
        """Number of generate() calls received."""
        return len(self.calls)

    def queue(self, *items: ScriptItem) -> "FakeModel":
        """Append responses (or exceptions) to the script."""
        self._script.extend(items)
        return self

    async def generate(
        self,
        messages: Sequence[dict[str, Any]],
        tool_definitions: Optional[Sequence[dict[str, Any]]] = None,
    ) -> ModelResponse:
        """
        Return the next scripted response.

        Raises:
            Exception: If the next scripted item is an exception.
        """
        messages_copy = copy.deepcopy(list(messages))
        definitions_copy = copy.deepcopy(list(tool_definitions or []))
        self.calls.append({"messages": messages_copy, "tool_definitions": definitions_copy})

        if self._script:
            item = self._script.popleft()
            if isinstance(item, Exception):
                raise item
            return item

        if self._responder is not None:
            result = self._responder(messages_copy, definitions_copy)
            if inspect.isawaitable(result):
                result = await result
            return result

        return ModelResponse(
            content=self.response_content,
            metadata={"model": "fake", "usage": None, "finish_reason": "stop"},
        )
