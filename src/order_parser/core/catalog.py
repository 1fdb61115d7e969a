"""Read-only helpers over an in-memory product catalog."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .models import Product, ProductId


def products_by_category(products: Iterable[Product]) -> Dict[str, List[Product]]:
    """Group products by category, keeping catalog order inside each group."""

    categories: Dict[str, List[Product]] = {}
    for product in products:
        categories.setdefault(product.category, []).append(product)
    return categories


def product_by_id(products: Iterable[Product], product_id: ProductId) -> Optional[Product]:
    # ids come back from forms and URLs as strings
    wanted = str(product_id).strip()
    for product in products:
        if str(product.id) == wanted:
            return product
    return None


__all__ = ["products_by_category", "product_by_id"]
