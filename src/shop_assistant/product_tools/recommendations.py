from typing import Any, Dict

from shop_assistant.llm_core import ErrorKind, get_logger
from shop_assistant.llm_core.tools import ToolExecutionResult, ToolKind
from .arguments import get_float, get_int, get_str
from .base import ProductTool
from .sources import ProductCatalog

logger = get_logger(__name__)

DEFAULT_LIMIT = 5
MAX_LIMIT = 10


class GetProductRecommendationsTool(ProductTool):
    """
    Hands the candidate products back to the model for ranking.

    The tool only filters by price; choosing and explaining the best options is
    left to the model, guided by the returned ``message``.
    """

    kind = ToolKind.RECOMMENDATIONS
    tool_name = "get_product_recommendations"
    description = (
        "Gets AI-powered personalized product recommendations based on the conversation context, user preferences, "
        "budget, and needs. Use this when the user asks for recommendations, suggestions, 'what should I buy', or "
        "needs help deciding between products. The AI will analyze the conversation and recommend multiple relevant "
        "products."
    )
    parameters = {
        "userId": {
            "type": "string",
            "description": "User ID to get personalized recommendations (required for context)",
        },
        "conversationContext": {
            "type": "string",
            "description": (
                "Summary of what the user is looking for based on the conversation (e.g., 'budget laptop for "
                "students', 'gaming phone under 200000 HUF', 'wireless headphones for commuting')"
            ),
        },
        "maxPrice": {"type": "number", "description": "Maximum price mentioned by user (optional)"},
        "minPrice": {"type": "number", "description": "Minimum price mentioned by user (optional)"},
        "limit": {
            "type": "integer",
            "description": f"Number of recommendations to return (default: {DEFAULT_LIMIT}, max: {MAX_LIMIT})",
        },
    }
    required = ["userId", "conversationContext"]

    def __init__(self, catalog: ProductCatalog) -> None:
        self.catalog = catalog

    async def execute(self, arguments: Dict[str, Any]) -> ToolExecutionResult:
        user_id = get_str(arguments, "userId")
        if not user_id:
            return ToolExecutionResult.fail(ErrorKind.INVALID_REQUEST, "userId parameter is required")
        context = get_str(arguments, "conversationContext")
        if not context:
            return ToolExecutionResult.fail(ErrorKind.INVALID_REQUEST, "conversationContext parameter is required")

        limit = DEFAULT_LIMIT
        requested = get_int(arguments, "limit")
        if requested is not None and requested > 0:
            limit = min(requested, MAX_LIMIT)
        max_price = get_float(arguments, "maxPrice")
        min_price = get_float(arguments, "minPrice")

        logger.info(
            f"Getting recommendations for user {user_id} with context: {context}, price range: {min_price}-{max_price}"
        )
        products = await self.catalog.list_products(user_id)
        if max_price is not None:
            products = [p for p in products if p.price <= max_price]
        if min_price is not None:
            products = [p for p in products if p.price >= min_price]

        if not products:
            logger.warning("No products available for recommendations")
            return ToolExecutionResult.ok(
                {"count": 0, "message": "No products found matching the criteria", "recommendations": []}
            )

        return ToolExecutionResult.ok(
            {
                "count": len(products),
                "userId": user_id,
                "context": context,
                "priceRange": {"min": min_price, "max": max_price},
                "products": [p.to_payload() for p in products],
                "message": (
                    f"Found {len(products)} products matching the criteria. Analyze these products based on the "
                    f"conversation context '{context}' and recommend the best {limit} options with detailed "
                    "explanations for each recommendation."
                ),
            }
        )
