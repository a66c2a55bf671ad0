"""Inbound chat requests and outbound assistant responses."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .product import Product


class ChatRequest(BaseModel):
    """A user utterance to be answered by the orchestrator.

    Attributes:
        message: The user's message. Must not be blank.
        user_id: Identifier of the requesting user.
        credentials: Provider API key. Missing or blank keys short-circuit the run.
        context_products: Products the user has saved, used to enrich the system prompt.
        conversation_id: Conversation to load history from and persist turns into.
    """

    message: str
    user_id: str = ""
    credentials: Optional[str] = None
    context_products: List[Product] = Field(default_factory=list)
    conversation_id: Optional[int] = None

    @field_validator("message")
    @classmethod
    def _message_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("message must not be blank")
        return value

    @property
    def has_credentials(self) -> bool:
        return bool(self.credentials and self.credentials.strip())


class ConversationalResponse(BaseModel):
    """The assistant's answer: non-empty text plus the products it found."""

    text: str
    products: List[Product] = Field(default_factory=list)
