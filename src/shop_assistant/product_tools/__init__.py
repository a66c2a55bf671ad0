"""The shopping tools exposed to the model."""

from typing import List, Optional

from shop_assistant.llm_core.tools import ToolCapability, ToolRegistry
from .analytics import GetPriceAnalyticsTool
from .base import ProductTool
from .compare import CompareProductsTool
from .details import GetProductDetailsTool
from .filter import FilterProductsTool
from .recommendations import GetProductRecommendationsTool
from .search import SearchProductsTool
from .sources import InMemoryProductCatalog, ProductCatalog, ProductSearchSource, StaticSearchSource
from .user_products import GetUserProductsTool


def default_product_tools(search_source: ProductSearchSource, catalog: ProductCatalog) -> List[ToolCapability]:
    """One instance of every shopping tool, wired to the given collaborators."""
    return [
        SearchProductsTool(search_source),
        FilterProductsTool(catalog),
        CompareProductsTool(catalog),
        GetProductDetailsTool(catalog),
        GetUserProductsTool(catalog),
        GetPriceAnalyticsTool(catalog),
        GetProductRecommendationsTool(catalog),
    ]


def build_default_registry(
    search_source: ProductSearchSource, catalog: ProductCatalog, registry: Optional[ToolRegistry] = None
) -> ToolRegistry:
    """Register the shopping tools (into ``registry`` if given) and freeze the result."""
    registry = registry if registry is not None else ToolRegistry()
    for tool in default_product_tools(search_source, catalog):
        registry.register(tool)
    return registry.freeze()


__all__ = [
    "ProductTool",
    "SearchProductsTool",
    "FilterProductsTool",
    "CompareProductsTool",
    "GetProductDetailsTool",
    "GetUserProductsTool",
    "GetPriceAnalyticsTool",
    "GetProductRecommendationsTool",
    "ProductSearchSource",
    "ProductCatalog",
    "InMemoryProductCatalog",
    "StaticSearchSource",
    "default_product_tools",
    "build_default_registry",
]
