from collections import defaultdict
from typing import Any, Dict, List

from shop_assistant.llm_core import Product, get_logger
from shop_assistant.llm_core.tools import ToolExecutionResult, ToolKind
from .arguments import get_str
from .base import ProductTool
from .sources import ProductCatalog

logger = get_logger(__name__)

TOP_STORES = 10


def _price_card(product: Product) -> Dict[str, Any]:
    return {"id": product.id, "name": product.name, "price": product.price, "currency": product.currency}


def store_breakdown(products: List[Product], limit: int = TOP_STORES) -> List[Dict[str, Any]]:
    """Per-store counts and price figures, busiest stores first."""
    grouped: Dict[str, List[float]] = defaultdict(list)
    for product in products:
        if product.store_name:
            grouped[product.store_name].append(product.price)

    rows = [
        {
            "storeName": store,
            "count": len(prices),
            "avgPrice": sum(prices) / len(prices),
            "minPrice": min(prices),
            "maxPrice": max(prices),
        }
        for store, prices in grouped.items()
    ]
    rows.sort(key=lambda row: row["count"], reverse=True)
    return rows[:limit]


class GetPriceAnalyticsTool(ProductTool):
    """Price statistics over saved products."""

    kind = ToolKind.ANALYTICS
    tool_name = "get_price_analytics"
    description = (
        "Gets price analytics, statistics, and trends for products. Use this when the user asks about price ranges, "
        "average prices, cheapest/most expensive products, or price statistics."
    )
    parameters = {
        "category": {
            "type": "string",
            "description": "Category to analyze (optional, analyzes all products if not specified)",
        },
        "userId": {"type": "string", "description": "User ID to analyze their saved products (optional)"},
    }

    def __init__(self, catalog: ProductCatalog) -> None:
        self.catalog = catalog

    async def execute(self, arguments: Dict[str, Any]) -> ToolExecutionResult:
        user_id = get_str(arguments, "userId")
        category = get_str(arguments, "category")

        products = await self.catalog.list_products(user_id)
        if category:
            products = [p for p in products if category.lower() in p.name.lower()]

        if not products:
            return ToolExecutionResult.ok({"message": "No products found for analysis", "count": 0})

        prices = sorted(p.price for p in products)
        by_price = sorted(products, key=lambda p: p.price)
        logger.info(f"Generated price analytics for {len(products)} products")

        return ToolExecutionResult.ok(
            {
                "totalProducts": len(products),
                "priceStatistics": {
                    "min": prices[0],
                    "max": prices[-1],
                    "average": sum(prices) / len(prices),
                    "median": prices[len(prices) // 2],
                    "sum": sum(prices),
                },
                "cheapestProduct": _price_card(by_price[0]),
                "mostExpensiveProduct": _price_card(by_price[-1]),
                "storeBreakdown": store_breakdown(products),
            }
        )
