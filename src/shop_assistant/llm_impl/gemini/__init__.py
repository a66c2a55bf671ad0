from .adapter import GeminiTurnAdapter, NO_CANDIDATES_MESSAGE
from .gateway import GeminiGateway, default_client_factory

__all__ = ["GeminiTurnAdapter", "NO_CANDIDATES_MESSAGE", "GeminiGateway", "default_client_factory"]
