"""Cart models with Decimal-based pricing."""
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable

from techmart import config
from techmart.services.models import Product
from techmart.services.money import round_money, multiply, add, to_decimal


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class CartLine:
    """One (product, quantity) pairing. Quantity is always >= 1."""
    product_id: int
    quantity: int
    id: str = ""
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self):
        if not self.id:
            self.id = uuid.uuid4().hex
        if not self.created_at:
            self.created_at = _now()
        if not self.updated_at:
            self.updated_at = self.created_at

    def touch(self) -> None:
        self.updated_at = _now()

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        """Create from dictionary. Raises KeyError/ValueError/TypeError on bad data."""
        quantity = int(data["quantity"])
        if quantity < 1:
            raise ValueError(f"stored quantity must be >= 1, got {quantity}")
        return cls(
            product_id=int(data["product_id"]),
            quantity=quantity,
            id=str(data.get("id", "")),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


@dataclass
class CartLineView:
    """A cart line joined with its current catalog record."""
    line: CartLine
    product: Product

    @property
    def unit_price(self) -> Decimal:
        return self.product.sell_price

    @property
    def line_total(self) -> Decimal:
        """Total price for all units."""
        return round_money(multiply(self.product.sell_price, self.line.quantity))

    def to_dict(self) -> dict:
        return {
            **self.line.to_dict(),
            "product": self.product.model_dump(mode="json"),
            "line_total": str(self.line_total),
        }


@dataclass(frozen=True)
class DerivedTotals:
    """Totals computed on every read, never stored."""
    item_count: int
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal

    @property
    def free_shipping(self) -> bool:
        return self.shipping == 0

    def to_dict(self) -> dict:
        return {
            "item_count": self.item_count,
            "subtotal": f"{self.subtotal:.2f}",
            "tax": f"{self.tax:.2f}",
            "shipping": f"{self.shipping:.2f}",
            "total": f"{self.total:.2f}",
        }


def compute_totals(views: Iterable[CartLineView]) -> DerivedTotals:
    """
    Derive totals from resolved lines.

    Calculation order:
    1. subtotal = sum(quantity * sell_price)
    2. tax = subtotal * TAX_RATE
    3. shipping = 0 at/above FREE_SHIPPING_THRESHOLD, flat SHIPPING_FEE below
    4. total = subtotal + tax + shipping
    """
    views = list(views)
    item_count = sum(view.line.quantity for view in views)
    subtotal = round_money(sum((view.line_total for view in views), Decimal("0")))
    tax = round_money(multiply(subtotal, config.TAX_RATE))
    if subtotal >= config.FREE_SHIPPING_THRESHOLD:
        shipping = round_money(0)
    else:
        shipping = round_money(to_decimal(config.SHIPPING_FEE))
    total = round_money(add(add(subtotal, tax), shipping))
    return DerivedTotals(
        item_count=item_count,
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        total=total,
    )
