from .base import ConversationMemory
from .in_memory import InMemoryConversationMemory, StoredTurn

__all__ = ["ConversationMemory", "InMemoryConversationMemory", "StoredTurn"]
