"""Data collaborators behind the product tools."""

from typing import Iterable, List, Optional, Protocol, runtime_checkable

from shop_assistant.llm_core.models import Product


@runtime_checkable
class ProductSearchSource(Protocol):
    """Live product search, e.g. a price-comparison site scraper."""

    async def search(self, term: str) -> List[Product]:
        """Products matching ``term``, best matches first."""
        ...


@runtime_checkable
class ProductCatalog(Protocol):
    """Products saved by users."""

    async def get_product(self, product_id: int) -> Optional[Product]:
        ...

    async def list_products(self, user_id: Optional[str] = None) -> List[Product]:
        """All products, or only those saved by ``user_id``."""
        ...


class InMemoryProductCatalog:
    """ProductCatalog over a fixed list of products."""

    def __init__(self, products: Iterable[Product] = ()) -> None:
        self._products = {product.id: product for product in products}

    def add(self, product: Product) -> None:
        self._products[product.id] = product

    async def get_product(self, product_id: int) -> Optional[Product]:
        return self._products.get(product_id)

    async def list_products(self, user_id: Optional[str] = None) -> List[Product]:
        products = list(self._products.values())
        if user_id:
            products = [p for p in products if p.user_id == user_id]
        return products


class StaticSearchSource:
    """ProductSearchSource that matches every whitespace-separated term against product names."""

    def __init__(self, products: Iterable[Product] = ()) -> None:
        self._products = list(products)

    async def search(self, term: str) -> List[Product]:
        words = [word.lower() for word in term.split() if word]
        if not words:
            return []
        return [p for p in self._products if all(word in p.name.lower() for word in words)]
