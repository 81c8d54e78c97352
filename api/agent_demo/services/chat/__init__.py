"""Chat persistence for demo conversations."""

from agent_demo.services.chat.chat_repository import ChatRepository

__all__ = ["ChatRepository"]
