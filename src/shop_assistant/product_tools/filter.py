from typing import Any, Dict

from shop_assistant.llm_core import get_logger
from shop_assistant.llm_core.tools import ToolExecutionResult, ToolKind
from .arguments import get_float, get_str
from .base import ProductTool
from .sources import ProductCatalog

logger = get_logger(__name__)


class FilterProductsTool(ProductTool):
    """Narrows saved products by price range, category keyword and store."""

    kind = ToolKind.FILTER
    tool_name = "filter_products"
    description = (
        "Filters products by price range, category, store, or other criteria. Use this when the user wants to find "
        "products within a specific price range, from a specific store, or in a particular category."
    )
    parameters = {
        "minPrice": {"type": "number", "description": "Minimum price filter (optional)"},
        "maxPrice": {"type": "number", "description": "Maximum price filter (optional)"},
        "category": {"type": "string", "description": "Product category to filter by (optional)"},
        "storeName": {"type": "string", "description": "Store name to filter by (optional)"},
        "userId": {"type": "string", "description": "User ID to filter user's saved products (optional)"},
    }

    def __init__(self, catalog: ProductCatalog) -> None:
        self.catalog = catalog

    async def execute(self, arguments: Dict[str, Any]) -> ToolExecutionResult:
        user_id = get_str(arguments, "userId")
        min_price = get_float(arguments, "minPrice")
        max_price = get_float(arguments, "maxPrice")
        category = get_str(arguments, "category")
        store_name = get_str(arguments, "storeName")

        products = await self.catalog.list_products(user_id)
        if min_price is not None:
            products = [p for p in products if p.price >= min_price]
        if max_price is not None:
            products = [p for p in products if p.price <= max_price]
        if category:
            # Products carry no category field; the keyword is matched against the name
            products = [p for p in products if category.lower() in p.name.lower()]
        if store_name:
            products = [p for p in products if p.store_name and store_name.lower() in p.store_name.lower()]

        logger.info(f"Filtered products: {len(products)} results")
        return ToolExecutionResult.ok(
            {
                "count": len(products),
                "filters": {
                    "minPrice": min_price is not None,
                    "maxPrice": max_price is not None,
                    "category": category is not None,
                    "storeName": store_name is not None,
                    "userId": user_id is not None,
                },
                "products": [p.to_payload() for p in products],
            }
        )
