"""Messages Package - conversation history management."""

from clever_agent.messages.manager import MessageManager

__all__ = ["MessageManager"]
