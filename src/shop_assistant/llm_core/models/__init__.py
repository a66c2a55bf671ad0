from .product import Product, products_from_payload, dedupe_products
from .conversation import ChatRequest, ConversationalResponse

__all__ = ["Product", "products_from_payload", "dedupe_products", "ChatRequest", "ConversationalResponse"]
