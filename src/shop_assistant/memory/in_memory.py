"""Process-local ConversationMemory with a retention cap and duplicate suppression."""

import asyncio
import itertools
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, Dict, List, Sequence, Tuple

from shop_assistant.llm_core import get_logger
from shop_assistant.llm_core.messages import ChatTurn, Role
from shop_assistant.llm_core.models import Product
from .base import ConversationMemory

logger = get_logger(__name__)


@dataclass(frozen=True)
class StoredTurn:
    """A turn as persisted, with its ordering keys and attached products."""

    id: int
    conversation_id: int
    turn: ChatTurn
    created_at: float
    user_id: str = ""
    products: Tuple[Product, ...] = field(default_factory=tuple)


class InMemoryConversationMemory(ConversationMemory):
    """
    Keeps conversations in process memory.

    At most ``max_turns`` turns are kept per conversation; the oldest are dropped
    first. A user text turn identical to one saved less than ``duplicate_window``
    seconds earlier in the same conversation is not stored again.
    """

    def __init__(self, max_turns: int = 100, duplicate_window: float = 5.0, clock: Callable[[], float] = time.time):
        if max_turns < 1:
            raise ValueError("max_turns must be at least 1")
        self.max_turns = max_turns
        self.duplicate_window = duplicate_window
        self._clock = clock
        self._ids = itertools.count(1)
        self._conversations: Dict[int, Deque[StoredTurn]] = {}
        self._lock = asyncio.Lock()

    async def get_history(self, conversation_id: int, limit: int) -> List[ChatTurn]:
        if limit <= 0:
            return []
        async with self._lock:
            stored = sorted(self._conversations.get(conversation_id, ()), key=lambda s: (s.created_at, s.id))
        return [s.turn for s in stored[-limit:]]

    async def save_turn(
        self, conversation_id: int, turn: ChatTurn, *, user_id: str = "", products: Sequence[Product] = ()
    ) -> bool:
        async with self._lock:
            now = self._clock()
            turns = self._conversations.setdefault(conversation_id, deque())

            if self._is_recent_duplicate(turns, turn, now):
                logger.info(f"Skipping duplicate user message in conversation {conversation_id}")
                return False

            turns.append(
                StoredTurn(
                    id=next(self._ids),
                    conversation_id=conversation_id,
                    turn=turn,
                    created_at=now,
                    user_id=user_id,
                    products=tuple(products),
                )
            )
            while len(turns) > self.max_turns:
                turns.popleft()
            return True

    async def stored_turns(self, conversation_id: int) -> List[StoredTurn]:
        """All retained records of a conversation, oldest first."""
        async with self._lock:
            return list(self._conversations.get(conversation_id, ()))

    def _is_recent_duplicate(self, turns: Deque[StoredTurn], turn: ChatTurn, now: float) -> bool:
        if turn.role != Role.USER or not turn.is_plain_text:
            return False
        for stored in reversed(turns):
            if now - stored.created_at >= self.duplicate_window:
                break
            if stored.turn.role == Role.USER and stored.turn.is_plain_text and stored.turn.text == turn.text:
                return True
        return False
