from typing import Any, Dict

from shop_assistant.llm_core import get_logger
from shop_assistant.llm_core.tools import ToolExecutionResult, ToolKind
from .arguments import get_str
from .base import ProductTool
from .sources import ProductCatalog

logger = get_logger(__name__)


class GetUserProductsTool(ProductTool):
    kind = ToolKind.USER_PRODUCTS
    tool_name = "get_user_products"
    description = (
        "Gets all products saved or associated with a specific user. Use this when the user asks about their saved "
        "products, wants to see their product list, or references 'my products'."
    )
    parameters = {
        "userId": {
            "type": "string",
            "description": "The user ID to get products for. If not provided, will use the current user context.",
        },
    }

    def __init__(self, catalog: ProductCatalog) -> None:
        self.catalog = catalog

    async def execute(self, arguments: Dict[str, Any]) -> ToolExecutionResult:
        user_id = get_str(arguments, "userId")
        products = await self.catalog.list_products(user_id)
        logger.info(f"Found {len(products)} products for user: {user_id or 'anonymous'}")
        return ToolExecutionResult.ok(
            {
                "userId": user_id or "anonymous",
                "count": len(products),
                "products": [p.summary() for p in products],
            }
        )
