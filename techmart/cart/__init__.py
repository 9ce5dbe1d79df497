"""Cart package: models, storage, and manager facade."""
from .models import CartLine, CartLineView, DerivedTotals, compute_totals
from .storage import CartStorage, RedisCartStorage, InMemoryCartStorage
from .service import CartManager, CartRegistry, configure_cart_registry, get_cart_registry

__all__ = [
    "CartLine",
    "CartLineView",
    "DerivedTotals",
    "compute_totals",
    "CartStorage",
    "RedisCartStorage",
    "InMemoryCartStorage",
    "CartManager",
    "CartRegistry",
    "configure_cart_registry",
    "get_cart_registry",
]
