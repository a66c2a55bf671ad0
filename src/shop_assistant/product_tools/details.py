from typing import Any, Dict

from shop_assistant.llm_core import ErrorKind, get_logger
from shop_assistant.llm_core.tools import ToolExecutionResult, ToolKind
from .arguments import get_int
from .base import ProductTool
from .sources import ProductCatalog

logger = get_logger(__name__)


class GetProductDetailsTool(ProductTool):
    """Full record of one saved product."""

    kind = ToolKind.DETAILS
    tool_name = "get_product_details"
    description = (
        "Gets detailed information about a specific product by its ID. Use this when the user asks about a specific "
        "product, wants details, or needs more information about a product they've seen."
    )
    parameters = {
        "productId": {
            "type": "integer",
            "description": "The unique identifier (ID) of the product to get details for",
        },
    }
    required = ["productId"]

    def __init__(self, catalog: ProductCatalog) -> None:
        self.catalog = catalog

    async def execute(self, arguments: Dict[str, Any]) -> ToolExecutionResult:
        if arguments.get("productId") is None:
            return ToolExecutionResult.fail(ErrorKind.INVALID_REQUEST, "productId parameter is required")

        product_id = get_int(arguments, "productId")
        if product_id is None or product_id <= 0:
            return ToolExecutionResult.fail(ErrorKind.INVALID_REQUEST, "productId must be a positive integer")

        product = await self.catalog.get_product(product_id)
        if product is None:
            logger.warning(f"Product not found: {product_id}")
            return ToolExecutionResult.fail(ErrorKind.NOT_FOUND, f"Product with ID {product_id} not found")

        payload = product.to_payload()
        return ToolExecutionResult.ok(
            {
                key: payload[key]
                for key in ("id", "name", "price", "currency", "storeName", "imageUrl", "productUrl", "createdAt")
            }
        )
