from .base import LLMGateway, ModelReply
from .clients import ClientPool

__all__ = ["ClientPool", "LLMGateway", "ModelReply"]
