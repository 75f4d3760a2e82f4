"""Message Manager - bounded, ordered conversation history.

The manager owns the history of one agent. Every add operation appends and
then trims once, so the window invariant ``len(history) <= max_messages``
holds after each mutation. Eviction always removes the oldest messages,
system messages included.
"""

import logging
from typing import Any, Iterable, Mapping

from clever_agent.models.domain import Message

logger = logging.getLogger(__name__)


class MessageManager:
    """Ordered conversation history with an optional sliding window.

    Args:
        max_messages: Maximum number of messages to keep (None = unlimited).
        max_tokens: Token budget. Stored for callers but not enforced;
            trimming is message-count based only.
    """

    def __init__(
        self, max_messages: int | None = None, max_tokens: int | None = None
    ) -> None:
        """Initialize an empty history."""
        if max_messages is not None and max_messages < 1:
            raise ValueError("max_messages must be at least 1")
        self.max_messages = max_messages
        self.max_tokens = max_tokens
        self._messages: list[Message] = []

    def add_user_message(self, content: str) -> "MessageManager":
        """Append a user message."""
        return self._append([Message.user(content)])

    def add_assistant_message(
        self, content: str, metadata: Mapping[str, Any] | None = None
    ) -> "MessageManager":
        """Append an assistant message, optionally carrying tool call records."""
        return self._append([Message.assistant(content, dict(metadata or {}))])

    def add_system_message(self, content: str) -> "MessageManager":
        """Append a system message."""
        return self._append([Message.system(content)])

    def add_message(self, message: Message) -> "MessageManager":
        """Append an already-built message."""
        return self._append([message])

    def add_tool_results(
        self, results: Iterable[Mapping[str, Any]]
    ) -> "MessageManager":
        """Append one tool message per result, in input order.

        Args:
            results: Entries of the form ``{tool_call_id, name, content}``.

        Returns:
            The manager, for chaining.
        """
        messages = [
            Message.tool(result["content"], result["tool_call_id"], result["name"])
            for result in results
        ]
        return self._append(messages)

    def get_messages(self) -> list[Message]:
        """Get a copy of the history."""
        return list(self._messages)

    def get_messages_array(self) -> list[dict[str, Any]]:
        """Get the history as flat records for model adapters."""
        return [message.to_dict() for message in self._messages]

    def clear(self) -> None:
        """Remove every message."""
        self._messages.clear()

    def __len__(self) -> int:
        return len(self._messages)

    def _append(self, messages: list[Message]) -> "MessageManager":
        self._messages.extend(messages)
        self._trim_if_needed()
        return self

    def _trim_if_needed(self) -> None:
        if self.max_messages is None:
            return
        overflow = len(self._messages) - self.max_messages
        if overflow > 0:
            del self._messages[:overflow]
            logger.debug("Evicted %d oldest message(s) from history", overflow)
