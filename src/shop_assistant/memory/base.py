"""Interface of the conversation store the orchestrator reads from and writes to."""

from abc import ABC, abstractmethod
from typing import List, Sequence

from shop_assistant.llm_core.messages import ChatTurn
from shop_assistant.llm_core.models import Product


class ConversationMemory(ABC):
    """Persistent, ordered turn storage keyed by conversation id."""

    @abstractmethod
    async def get_history(self, conversation_id: int, limit: int) -> List[ChatTurn]:
        """
        Returns the most recent turns of a conversation.

        Args:
            conversation_id: The conversation to read.
            limit: Maximum number of turns to return.

        Returns:
            At most ``limit`` turns, oldest first.
        """

    @abstractmethod
    async def save_turn(
        self, conversation_id: int, turn: ChatTurn, *, user_id: str = "", products: Sequence[Product] = ()
    ) -> bool:
        """
        Appends a turn to a conversation.

        Args:
            conversation_id: The conversation to append to.
            turn: The turn to store.
            user_id: Owner of the conversation.
            products: Products shown with this turn.

        Returns:
            False when the store declined the turn as a duplicate, True otherwise.
        """
