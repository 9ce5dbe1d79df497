"""
Product Catalog Accessor.

Read-only product lookups for the cart engine. The catalog itself is owned
by the admin back-office; this module only resolves ids to current price,
stock and active flag.
"""
from typing import Dict, Optional, Protocol

from techmart.services.models import Product
from techmart.services.repositories import ProductRepository


class ProductCatalog(Protocol):
    """Anything that can resolve a product id to its current record."""

    async def get_product_by_id(self, product_id: int) -> Optional[Product]:
        ...


class InMemoryCatalog:
    """Dict-backed catalog for local development and tests."""

    def __init__(self, products=None):
        self._products: Dict[int, Product] = {}
        for product in products or []:
            self.put(product)

    async def get_product_by_id(self, product_id: int) -> Optional[Product]:
        return self._products.get(product_id)

    def put(self, product: Product) -> None:
        self._products[product.id] = product

    def delete(self, product_id: int) -> None:
        self._products.pop(product_id, None)

    def set_stock(self, product_id: int, quantity: int) -> None:
        """Simulate an external stock change."""
        product = self._products[product_id]
        self._products[product_id] = product.model_copy(update={"quantity": quantity})

    def set_active(self, product_id: int, is_active: bool) -> None:
        product = self._products[product_id]
        self._products[product_id] = product.model_copy(update={"is_active": is_active})


__all__ = ["ProductCatalog", "ProductRepository", "InMemoryCatalog"]
