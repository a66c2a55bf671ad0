"""Product records exchanged between tools, the orchestrator and callers."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from ..logger import get_logger

logger = get_logger(__name__)


class Product(BaseModel):
    """A product found by search or stored in the user's catalog.

    Accepts both snake_case and camelCase keys. ``to_payload`` produces the
    camelCase dictionary embedded in tool results.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    price: float = 0.0
    currency: str = "HUF"
    image_url: Optional[str] = None
    product_url: Optional[str] = None
    store_name: Optional[str] = None
    scraped_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user_id: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def summary(self) -> Dict[str, Any]:
        """Short form used by listing tools."""
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "currency": self.currency,
            "storeName": self.store_name,
        }


def products_from_payload(entries: Any) -> List[Product]:
    """Parse the ``products`` entries of a tool payload.

    Entries that are already ``Product`` instances pass through. Malformed
    entries are skipped with a warning.

    Args:
        entries: The raw ``products`` value from a tool payload.

    Returns:
        The parsed products, in input order.
    """
    if not isinstance(entries, (list, tuple)):
        return []

    products: List[Product] = []
    for entry in entries:
        if isinstance(entry, Product):
            products.append(entry)
            continue
        try:
            products.append(Product.model_validate(entry))
        except ValidationError as exc:
            logger.warning(f"Skipping malformed product entry: {exc.error_count()} validation error(s)")
    return products


def dedupe_products(products: Iterable[Product]) -> List[Product]:
    """Collapse products sharing an id. The last occurrence wins, first-seen order is kept."""
    by_id: Dict[int, Product] = {}
    for product in products:
        by_id[product.id] = product
    return list(by_id.values())
