from .adapter import OpenAITurnAdapter
from .gateway import OpenAIGateway

__all__ = ["OpenAITurnAdapter", "OpenAIGateway"]
