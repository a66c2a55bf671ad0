from .locks import KeyedLock
from .orchestrator import ConversationOrchestrator
from .prompts import (
    APOLOGY_MESSAGE,
    MISSING_CREDENTIALS_MESSAGE,
    NOTHING_TO_SAY_MESSAGE,
    SYSTEM_PROMPT,
    TOOLS_EXHAUSTED_MESSAGE,
    build_system_prompt,
    finalize_text,
)
from .state import LoopState, Phase

__all__ = [
    "ConversationOrchestrator",
    "KeyedLock",
    "LoopState",
    "Phase",
    "SYSTEM_PROMPT",
    "APOLOGY_MESSAGE",
    "MISSING_CREDENTIALS_MESSAGE",
    "NOTHING_TO_SAY_MESSAGE",
    "TOOLS_EXHAUSTED_MESSAGE",
    "build_system_prompt",
    "finalize_text",
]
