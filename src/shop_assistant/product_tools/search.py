from typing import Any, Dict

from shop_assistant.llm_core import ErrorKind, get_logger
from shop_assistant.llm_core.tools import ToolExecutionResult, ToolKind
from .arguments import get_int, get_str
from .base import ProductTool
from .sources import ProductSearchSource

logger = get_logger(__name__)

DEFAULT_MAX_RESULTS = 50
MAX_RESULTS_CAP = 100


class SearchProductsTool(ProductTool):
    """Live product search through the configured ``ProductSearchSource``."""

    kind = ToolKind.SEARCH
    tool_name = "search_products"
    description = (
        "Searches for products on e-commerce sites based on a search query. Use this when the user wants to find "
        "products, search for items, or look for specific products."
    )
    parameters = {
        "query": {
            "type": "string",
            "description": "The search query or product name to search for (e.g., 'laptop', 'iPhone 15', 'wireless headphones')",
        },
        "maxResults": {
            "type": "integer",
            "description": f"Maximum number of results to return (default: {DEFAULT_MAX_RESULTS}, max: {MAX_RESULTS_CAP})",
        },
    }
    required = ["query"]

    def __init__(self, source: ProductSearchSource) -> None:
        self.source = source

    async def execute(self, arguments: Dict[str, Any]) -> ToolExecutionResult:
        if "query" not in arguments or arguments["query"] is None:
            return ToolExecutionResult.fail(ErrorKind.INVALID_REQUEST, "Query parameter is required")
        query = get_str(arguments, "query")
        if not query:
            return ToolExecutionResult.fail(ErrorKind.INVALID_REQUEST, "Query cannot be empty")

        max_results = DEFAULT_MAX_RESULTS
        requested = get_int(arguments, "maxResults")
        if requested is not None and requested > 0:
            max_results = min(requested, MAX_RESULTS_CAP)

        logger.info(f"Searching for products with query: {query}, max results: {max_results}")
        products = (await self.source.search(query))[:max_results]
        logger.info(f"Found {len(products)} products for query: {query}")

        return ToolExecutionResult.ok(
            {"query": query, "count": len(products), "products": [p.to_payload() for p in products]}
        )
