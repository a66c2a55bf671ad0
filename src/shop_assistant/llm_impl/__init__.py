"""Provider-specific LLM gateway implementations."""

from .gemini import GeminiGateway
from .openai_api import OpenAIGateway

__all__ = ["GeminiGateway", "OpenAIGateway"]
