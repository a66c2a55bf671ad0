from typing import Any, Dict, List

from shop_assistant.llm_core import ErrorKind, Product, get_logger
from shop_assistant.llm_core.tools import ToolExecutionResult, ToolKind
from .arguments import get_int_list
from .base import ProductTool
from .sources import ProductCatalog

logger = get_logger(__name__)

MAX_COMPARED = 5


class CompareProductsTool(ProductTool):
    """Side-by-side price comparison of two to five saved products."""

    kind = ToolKind.COMPARE
    tool_name = "compare_products"
    description = (
        "Compares multiple products by their IDs. Use this when the user wants to compare products, see price "
        "differences, or get recommendations between products. Requires at least 2 product IDs."
    )
    parameters = {
        "productIds": {
            "type": "array",
            "description": "Array of product IDs (integers) to compare (minimum 2, maximum 5 products). Example: [1, 2, 3]",
        },
    }
    required = ["productIds"]

    def __init__(self, catalog: ProductCatalog) -> None:
        self.catalog = catalog

    async def execute(self, arguments: Dict[str, Any]) -> ToolExecutionResult:
        ids = get_int_list(arguments, "productIds")
        if ids is None:
            return ToolExecutionResult.fail(ErrorKind.INVALID_REQUEST, "productIds parameter is required")

        ids = [product_id for product_id in ids if product_id > 0]
        if len(ids) < 2:
            return ToolExecutionResult.fail(
                ErrorKind.INVALID_REQUEST, "At least 2 product IDs are required for comparison"
            )
        ids = ids[:MAX_COMPARED]
        logger.info(f"Comparing {len(ids)} products: {', '.join(map(str, ids))}")

        products: List[Product] = []
        for product_id in ids:
            product = await self.catalog.get_product(product_id)
            if product is not None:
                products.append(product)

        if len(products) < 2:
            return ToolExecutionResult.fail(ErrorKind.NOT_FOUND, "Could not find at least 2 valid products to compare")

        prices = [p.price for p in products]
        by_price = sorted(products, key=lambda p: p.price)
        logger.info(f"Successfully compared {len(products)} products")
        return ToolExecutionResult.ok(
            {
                "productCount": len(products),
                "products": [p.summary() for p in products],
                "priceRange": {"min": min(prices), "max": max(prices), "average": sum(prices) / len(prices)},
                "cheapest": by_price[0].id,
                "mostExpensive": by_price[-1].id,
            }
        )
