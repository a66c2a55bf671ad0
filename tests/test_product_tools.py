import pytest

from shop_assistant.llm_core import ErrorKind, Product
from shop_assistant.product_tools import (
    CompareProductsTool,
    FilterProductsTool,
    GetPriceAnalyticsTool,
    GetProductDetailsTool,
    GetProductRecommendationsTool,
    GetUserProductsTool,
    InMemoryProductCatalog,
    SearchProductsTool,
    StaticSearchSource,
    build_default_registry,
)
from shop_assistant.product_tools.arguments import get_float, get_int, get_int_list


def test_argument_readers() -> None:
    assert get_float({"v": "12.5"}, "v") == 12.5
    assert get_float({"v": True}, "v") is None
    assert get_float({"v": "nan"}, "v") is None
    assert get_int({"v": 3.0}, "v") == 3
    assert get_int({"v": 3.5}, "v") is None
    assert get_int_list({"v": "1, 2,x"}, "v") == [1, 2]
    assert get_int_list({"v": [1, "2", None]}, "v") == [1, 2]
    assert get_int_list({}, "v") is None


def test_default_registry_contains_every_tool(search_source: StaticSearchSource, catalog: InMemoryProductCatalog) -> None:
    registry = build_default_registry(search_source, catalog)

    assert registry.frozen
    assert registry.names == [
        "search_products",
        "filter_products",
        "compare_products",
        "get_product_details",
        "get_user_products",
        "get_price_analytics",
        "get_product_recommendations",
    ]
    declarations = {d["name"]: d for d in registry.function_declarations()}
    assert declarations["search_products"]["parameters"]["required"] == ["query"]
    assert declarations["compare_products"]["parameters"]["properties"]["productIds"]["items"] == {"type": "integer"}


@pytest.mark.asyncio
async def test_search_products(search_source: StaticSearchSource) -> None:
    tool = SearchProductsTool(search_source)

    result = await tool.execute({"query": "iPhone"})

    assert result.success
    assert result.result is not None
    assert result.result["query"] == "iPhone"
    assert result.result["count"] == 3
    assert {p["id"] for p in result.result["products"]} == {1, 2, 3}


@pytest.mark.asyncio
async def test_search_products_caps_results() -> None:
    many = [Product(id=i, name=f"Cable {i}") for i in range(1, 151)]
    tool = SearchProductsTool(StaticSearchSource(many))

    default = await tool.execute({"query": "cable"})
    capped = await tool.execute({"query": "cable", "maxResults": 500})
    limited = await tool.execute({"query": "cable", "maxResults": "2"})

    assert default.result is not None and default.result["count"] == 50
    assert capped.result is not None and capped.result["count"] == 100
    assert limited.result is not None and limited.result["count"] == 2


@pytest.mark.asyncio
async def test_search_products_validates_query(search_source: StaticSearchSource) -> None:
    tool = SearchProductsTool(search_source)

    missing = await tool.execute({})
    blank = await tool.execute({"query": "   "})

    assert missing.error_code == ErrorKind.INVALID_REQUEST
    assert missing.error_message == "Query parameter is required"
    assert blank.error_message == "Query cannot be empty"


@pytest.mark.asyncio
async def test_filter_products(catalog: InMemoryProductCatalog) -> None:
    tool = FilterProductsTool(catalog)

    result = await tool.execute({"maxPrice": 350000, "storeName": "emag"})

    assert result.result is not None
    assert [p["id"] for p in result.result["products"]] == [1, 3]
    assert result.result["filters"] == {
        "minPrice": False,
        "maxPrice": True,
        "category": False,
        "storeName": True,
        "userId": False,
    }


@pytest.mark.asyncio
async def test_filter_products_by_user_and_category(catalog: InMemoryProductCatalog) -> None:
    result = await FilterProductsTool(catalog).execute({"userId": "user-2", "category": "galaxy"})

    assert result.result is not None
    assert [p["id"] for p in result.result["products"]] == [4]


@pytest.mark.asyncio
async def test_compare_products(catalog: InMemoryProductCatalog) -> None:
    result = await CompareProductsTool(catalog).execute({"productIds": [1, 3, 2]})

    assert result.success
    assert result.result is not None
    assert result.result["productCount"] == 3
    assert result.result["cheapest"] == 3
    assert result.result["mostExpensive"] == 2
    assert result.result["priceRange"]["min"] == 289990
    assert result.result["priceRange"]["average"] == pytest.approx((349990 + 289990 + 499990) / 3)


@pytest.mark.asyncio
async def test_compare_products_errors(catalog: InMemoryProductCatalog) -> None:
    tool = CompareProductsTool(catalog)

    missing = await tool.execute({})
    too_few = await tool.execute({"productIds": [1]})
    unknown = await tool.execute({"productIds": [1, 99]})

    assert missing.error_message == "productIds parameter is required"
    assert too_few.error_code == ErrorKind.INVALID_REQUEST
    assert too_few.error_message == "At least 2 product IDs are required for comparison"
    assert unknown.error_code == ErrorKind.NOT_FOUND


@pytest.mark.asyncio
async def test_compare_products_uses_first_five_ids() -> None:
    catalog = InMemoryProductCatalog(Product(id=i, name=f"P{i}", price=i) for i in range(1, 8))

    result = await CompareProductsTool(catalog).execute({"productIds": list(range(1, 8))})

    assert result.result is not None
    assert result.result["productCount"] == 5


@pytest.mark.asyncio
async def test_get_product_details(catalog: InMemoryProductCatalog) -> None:
    tool = GetProductDetailsTool(catalog)

    found = await tool.execute({"productId": "2"})
    missing = await tool.execute({"productId": 42})
    negative = await tool.execute({"productId": -1})
    absent = await tool.execute({})

    assert found.result is not None
    assert found.result["name"] == "Apple iPhone 15 Pro 256GB"
    assert set(found.result) == {"id", "name", "price", "currency", "storeName", "imageUrl", "productUrl", "createdAt"}
    assert missing.error_code == ErrorKind.NOT_FOUND
    assert missing.error_message == "Product with ID 42 not found"
    assert negative.error_message == "productId must be a positive integer"
    assert absent.error_message == "productId parameter is required"


@pytest.mark.asyncio
async def test_get_user_products(catalog: InMemoryProductCatalog) -> None:
    tool = GetUserProductsTool(catalog)

    mine = await tool.execute({"userId": "user-1"})
    everyone = await tool.execute({})

    assert mine.result is not None
    assert mine.result["count"] == 2
    assert mine.result["products"][0] == {
        "id": 1,
        "name": "Apple iPhone 15 128GB",
        "price": 349990.0,
        "currency": "HUF",
        "storeName": "eMAG",
    }
    assert everyone.result is not None
    assert everyone.result["userId"] == "anonymous"
    assert everyone.result["count"] == 4


@pytest.mark.asyncio
async def test_price_analytics(catalog: InMemoryProductCatalog) -> None:
    result = await GetPriceAnalyticsTool(catalog).execute({})

    assert result.result is not None
    stats = result.result["priceStatistics"]
    assert result.result["totalProducts"] == 4
    assert stats["min"] == 289990
    assert stats["max"] == 499990
    assert stats["median"] == 349990
    assert result.result["cheapestProduct"]["id"] == 3
    assert result.result["mostExpensiveProduct"]["id"] == 2
    assert result.result["storeBreakdown"][0]["storeName"] == "eMAG"
    assert result.result["storeBreakdown"][0]["count"] == 2


@pytest.mark.asyncio
async def test_price_analytics_without_products() -> None:
    result = await GetPriceAnalyticsTool(InMemoryProductCatalog()).execute({"category": "tv"})

    assert result.success
    assert result.result == {"message": "No products found for analysis", "count": 0}


@pytest.mark.asyncio
async def test_recommendations(catalog: InMemoryProductCatalog) -> None:
    tool = GetProductRecommendationsTool(catalog)

    result = await tool.execute(
        {"userId": "user-1", "conversationContext": "iPhone for photography", "maxPrice": 400000, "limit": 20}
    )

    assert result.result is not None
    assert result.result["count"] == 1
    assert result.result["priceRange"] == {"min": None, "max": 400000.0}
    assert "recommend the best 10 options" in result.result["message"]


@pytest.mark.asyncio
async def test_recommendations_validation_and_empty(catalog: InMemoryProductCatalog) -> None:
    tool = GetProductRecommendationsTool(catalog)

    no_user = await tool.execute({"conversationContext": "x"})
    no_context = await tool.execute({"userId": "user-1"})
    nothing = await tool.execute({"userId": "user-1", "conversationContext": "cheap", "maxPrice": 1})

    assert no_user.error_message == "userId parameter is required"
    assert no_context.error_message == "conversationContext parameter is required"
    assert nothing.result == {"count": 0, "message": "No products found matching the criteria", "recommendations": []}
