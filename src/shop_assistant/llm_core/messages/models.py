"""Provider-agnostic conversation turns exchanged with the LLM gateway."""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


def new_call_id() -> str:
    """Locally generated identifier correlating a tool call with its result."""
    return uuid.uuid4().hex


class Role(str, Enum):
    """Author of a chat turn. Tool results are carried by ``user`` turns."""

    USER = "user"
    MODEL = "model"


class ToolCall(BaseModel):
    """A single request, produced by the model, to invoke one tool.

    Attributes:
        name: Name of the requested tool.
        arguments: Decoded JSON arguments.
        call_id: Local correlation id, never the provider's.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)
    call_id: str = Field(default_factory=new_call_id)


class ToolResultContent(BaseModel):
    """Payload of a tool result turn."""

    model_config = ConfigDict(frozen=True)

    name: str
    payload: Dict[str, Any]
    call_id: Optional[str] = None


class ChatTurn(BaseModel):
    """One turn of a conversation.

    A turn carries plain text, the tool calls requested by the model, or the
    result of one tool call. Conversations are ordered lists of turns.
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    text: Optional[str] = None
    tool_calls: List[ToolCall] = Field(default_factory=list)
    tool_result: Optional[ToolResultContent] = None

    @classmethod
    def user(cls, text: str) -> "ChatTurn":
        return cls(role=Role.USER, text=text)

    @classmethod
    def model(cls, text: Optional[str] = None, tool_calls: Optional[List[ToolCall]] = None) -> "ChatTurn":
        return cls(role=Role.MODEL, text=text or None, tool_calls=list(tool_calls or []))

    @classmethod
    def tool(cls, name: str, payload: Dict[str, Any], call_id: Optional[str] = None) -> "ChatTurn":
        return cls(role=Role.USER, tool_result=ToolResultContent(name=name, payload=payload, call_id=call_id))

    @property
    def is_plain_text(self) -> bool:
        """True for turns carrying only text (no tool calls or results)."""
        return bool(self.text) and not self.tool_calls and self.tool_result is None
