"""Cart manager service: stock-aware cart state for one customer at a time."""
import asyncio
import time
from typing import Callable, Dict, List, Optional

from techmart import config
from techmart.errors import (
    ERROR_INVALID_QUANTITY,
    InsufficientStock,
    NotAuthenticated,
    PersistenceFailure,
    ProductUnavailable,
)
from techmart.logging import get_logger, sanitize_id_for_logging
from techmart.services.catalog import ProductCatalog
from techmart.services.models import Product
from .models import CartLine, CartLineView, DerivedTotals, compute_totals
from .storage import CartStorage

logger = get_logger(__name__)


class CartManager:
    """
    Owns the cart lines of the currently bound customer.

    Features:
    - Stock and availability checked against the catalog before every
      add/update; a rejected call leaves the cart untouched
    - At most one line per product (adding again increments)
    - Whole cart persisted after every mutation; a failed save raises
      PersistenceFailure but keeps the in-memory change
    - bind()/unbind() re-scope the manager on login/logout; unbind never
      deletes the stored cart

    Each fetch -> validate -> mutate -> persist sequence holds the manager's
    lock, and so do bind() and unbind(). A mutation therefore always writes
    under the customer it started for, and two coroutines working on the same
    cart cannot both pass the stock check against the same snapshot.
    """

    def __init__(self, catalog: ProductCatalog, storage: CartStorage):
        self.catalog = catalog
        self.storage = storage
        self._customer_id = None
        self._lines: List[CartLine] = []
        self._lock = asyncio.Lock()

    # ==================== SESSION SCOPE ====================

    @property
    def customer_id(self):
        return self._customer_id

    @property
    def is_bound(self) -> bool:
        return self._customer_id is not None

    async def bind(self, customer_id) -> None:
        """Scope the manager to ``customer_id`` and restore their stored cart."""
        async with self._lock:
            await self._load(customer_id)

    async def ensure_bound(self, customer_id) -> None:
        """Bind to ``customer_id`` unless already bound to them."""
        async with self._lock:
            if self._customer_id != customer_id:
                await self._load(customer_id)

    async def unbind(self) -> None:
        """
        Drop in-memory state (logout). Stored cart is kept for the next login.

        Waits for an in-flight mutation to finish saving first.
        """
        async with self._lock:
            self._customer_id = None
            self._lines = []

    async def refresh(self) -> None:
        """Reload the stored cart, discarding in-memory state."""
        async with self._lock:
            if self._customer_id is None:
                return
            self._lines = await self.storage.load(self._customer_id)

    # ==================== MUTATIONS ====================

    async def add_item(self, product_id: int, quantity: int = 1) -> CartLine:
        """Add ``quantity`` units, merging into an existing line."""
        self._require_customer()
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValueError(ERROR_INVALID_QUANTITY)

        async with self._lock:
            customer_id = self._require_customer()
            product = await self._resolve_orderable(product_id)
            existing = self._find(product_id)
            requested = quantity + (existing.quantity if existing else 0)
            if requested > product.quantity:
                self._log_rejection(product_id, requested, product.quantity)
                raise InsufficientStock(product_id, requested, product.quantity)

            if existing:
                existing.quantity = requested
                existing.touch()
                line = existing
            else:
                line = CartLine(product_id=product_id, quantity=quantity)
                self._lines.append(line)

            await self._persist(customer_id, line)

        logger.info(
            f"Cart {sanitize_id_for_logging(customer_id)}: "
            f"product {sanitize_id_for_logging(product_id)} qty={line.quantity}"
        )
        return line

    async def update_quantity(self, product_id: int, new_quantity: int) -> Optional[CartLine]:
        """
        Set a line's quantity. ``new_quantity <= 0`` removes the line.

        Returns the updated line, or None when the product was removed or
        had no line to update.
        """
        self._require_customer()
        if not isinstance(new_quantity, int) or isinstance(new_quantity, bool):
            raise ValueError(ERROR_INVALID_QUANTITY)
        if new_quantity <= 0:
            await self.remove_item(product_id)
            return None

        async with self._lock:
            customer_id = self._require_customer()
            product = await self._resolve_orderable(product_id)
            if new_quantity > product.quantity:
                self._log_rejection(product_id, new_quantity, product.quantity)
                raise InsufficientStock(product_id, new_quantity, product.quantity)

            line = self._find(product_id)
            if line is None:
                logger.debug(f"No cart line for product {sanitize_id_for_logging(product_id)}")
                return None

            line.quantity = new_quantity
            line.touch()
            await self._persist(customer_id, line)
        return line

    async def remove_item(self, product_id: int) -> None:
        """Remove the product's line. Removing a missing line is a no-op."""
        self._require_customer()
        async with self._lock:
            customer_id = self._require_customer()
            remaining = [line for line in self._lines if line.product_id != product_id]
            if len(remaining) == len(self._lines):
                return
            self._lines = remaining
            await self._persist(customer_id, None)

    async def clear(self) -> None:
        """Remove every line."""
        self._require_customer()
        async with self._lock:
            customer_id = self._require_customer()
            if not self._lines:
                return
            self._lines = []
            await self._persist(customer_id, None)

    # ==================== READS ====================

    @property
    def lines(self) -> List[CartLine]:
        """Stored lines in insertion order (a copy)."""
        return list(self._lines)

    @property
    def item_count(self) -> int:
        """Badge count: sum of quantities across all stored lines."""
        return sum(line.quantity for line in self._lines)

    def get_line(self, product_id: int) -> Optional[CartLine]:
        return self._find(product_id)

    def is_in_cart(self, product_id: int) -> bool:
        return self._find(product_id) is not None

    def quantity_in_cart(self, product_id: int) -> int:
        line = self._find(product_id)
        return line.quantity if line else 0

    async def get_lines_with_products(self) -> List[CartLineView]:
        """
        Join lines with the catalog.

        Lines whose product no longer resolves (deleted, or the lookup failed)
        are left out of the view but stay in storage.
        """
        lines = list(self._lines)
        if not lines:
            return []

        # Fetch all products in parallel
        results = await asyncio.gather(
            *[self.catalog.get_product_by_id(line.product_id) for line in lines],
            return_exceptions=True,
        )

        views = []
        for line, product in zip(lines, results):
            if isinstance(product, Exception):
                logger.warning(
                    f"Catalog lookup failed for product {sanitize_id_for_logging(line.product_id)}: {product}"
                )
                continue
            if product is None:
                continue
            views.append(CartLineView(line=line, product=product))
        return views

    async def get_derived_totals(self) -> DerivedTotals:
        return compute_totals(await self.get_lines_with_products())

    # ==================== INTERNALS ====================

    def _require_customer(self):
        if self._customer_id is None:
            raise NotAuthenticated()
        return self._customer_id

    async def _load(self, customer_id) -> None:
        lines = await self.storage.load(customer_id)
        self._customer_id = customer_id
        self._lines = lines
        logger.info(
            f"Cart bound to customer {sanitize_id_for_logging(customer_id)} ({len(lines)} lines)"
        )

    def _find(self, product_id: int) -> Optional[CartLine]:
        return next((line for line in self._lines if line.product_id == product_id), None)

    async def _resolve_orderable(self, product_id: int) -> Product:
        """Current product record, or ProductUnavailable."""
        try:
            product = await self.catalog.get_product_by_id(product_id)
        except Exception as e:
            logger.warning(
                f"Catalog lookup failed for product {sanitize_id_for_logging(product_id)}: {e}"
            )
            raise ProductUnavailable(product_id) from e
        if product is None or not product.is_active:
            logger.info(f"Product {sanitize_id_for_logging(product_id)} unavailable")
            raise ProductUnavailable(product_id)
        return product

    async def _persist(self, customer_id, line: Optional[CartLine]) -> None:
        try:
            await self.storage.save(customer_id, list(self._lines))
        except PersistenceFailure as e:
            # already logged by the storage adapter
            raise PersistenceFailure(customer_id, line) from e
        except Exception as e:
            logger.error(
                f"Failed to save cart for customer {sanitize_id_for_logging(customer_id)}: {e}"
            )
            raise PersistenceFailure(customer_id, line) from e

    def _log_rejection(self, product_id: int, requested: int, available: int) -> None:
        logger.info(
            f"Insufficient stock for product {sanitize_id_for_logging(product_id)}: "
            f"requested={requested} available={available}"
        )


class CartRegistry:
    """
    One bound CartManager per signed-in customer.

    Managers are bound outside any registry-wide lock, so a slow storage load
    for one customer never delays another. ``release`` is the logout path:
    the manager is unbound and forgotten, the stored cart stays for the next
    login. Managers nobody asked for within ``idle_seconds`` (customers whose
    session expired without a logout) are dropped on the next lookup.
    """

    def __init__(
        self,
        catalog: ProductCatalog,
        storage: CartStorage,
        idle_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.catalog = catalog
        self.storage = storage
        self.idle_seconds = config.CART_IDLE_SECONDS if idle_seconds is None else idle_seconds
        self._clock = clock
        self._managers: Dict[object, CartManager] = {}
        self._last_used: Dict[object, float] = {}

    async def for_customer(self, customer_id) -> CartManager:
        self._evict_idle()
        manager = self._managers.get(customer_id)
        if manager is None:
            manager = CartManager(self.catalog, self.storage)
            self._managers[customer_id] = manager
        self._last_used[customer_id] = self._clock()
        await manager.ensure_bound(customer_id)
        return manager

    async def release(self, customer_id) -> None:
        manager = self._managers.pop(customer_id, None)
        self._last_used.pop(customer_id, None)
        if manager is not None:
            await manager.unbind()

    def _evict_idle(self) -> None:
        if self.idle_seconds <= 0:
            return
        cutoff = self._clock() - self.idle_seconds
        for customer_id in [c for c, used in self._last_used.items() if used < cutoff]:
            # stored cart is already up to date; only the in-memory copy goes
            self._managers.pop(customer_id, None)
            del self._last_used[customer_id]
            logger.debug(f"Evicted idle cart for customer {sanitize_id_for_logging(customer_id)}")

    def __contains__(self, customer_id) -> bool:
        return customer_id in self._managers

    def __len__(self) -> int:
        return len(self._managers)


# Singleton instance
_cart_registry: Optional[CartRegistry] = None


def configure_cart_registry(catalog: ProductCatalog, storage: CartStorage, **options) -> CartRegistry:
    """Install the process-wide registry (called at app startup)."""
    global _cart_registry
    _cart_registry = CartRegistry(catalog, storage, **options)
    return _cart_registry


def get_cart_registry() -> CartRegistry:
    """Get CartRegistry singleton."""
    if _cart_registry is None:
        raise RuntimeError("Cart registry not configured; call configure_cart_registry() at startup")
    return _cart_registry
