"""
Cart and access-control errors.

Message constants are the single source of user-facing strings; each
exception renders one of them as its str() so callers can show it as-is.
"""
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from techmart.cart.models import CartLine

# Auth errors
ERROR_NOT_AUTHENTICATED = "Please login to manage your cart"
ERROR_UNAUTHORIZED = "You are not authorized to perform this action"
ERROR_ADMIN_PRIVILEGES_FIXED = "Cannot modify privileges for admin users."

# Product errors
ERROR_PRODUCT_UNAVAILABLE = "This product is no longer available"
ERROR_OUT_OF_STOCK = "Out of stock"
ERROR_ONLY_N_LEFT = "Only {available} left in stock"

# Storage errors
ERROR_CART_NOT_SAVED = "Your cart was updated but could not be saved. Changes may be lost after you sign out."

# Request errors
ERROR_INVALID_QUANTITY = "Quantity must be a positive integer"


class CartError(Exception):
    """Base class for cart engine failures."""


class NotAuthenticated(CartError):
    """A cart mutation was attempted with no customer bound."""

    def __init__(self, message: str = ERROR_NOT_AUTHENTICATED):
        super().__init__(message)


class ProductUnavailable(CartError):
    """Product is missing, deleted, or inactive."""

    def __init__(self, product_id, message: str = ERROR_PRODUCT_UNAVAILABLE):
        super().__init__(message)
        self.product_id = product_id


class InsufficientStock(CartError):
    """Requested quantity exceeds available stock."""

    def __init__(self, product_id, requested: int, available: int):
        if available <= 0:
            message = ERROR_OUT_OF_STOCK
        else:
            message = ERROR_ONLY_N_LEFT.format(available=available)
        super().__init__(message)
        self.product_id = product_id
        self.requested = requested
        self.available = available


class PersistenceFailure(CartError):
    """
    The cart could not be stored.

    The in-memory mutation that preceded the save has already been applied
    and is NOT rolled back; ``line`` is the line that mutation produced
    (None for removals and clears).
    """

    def __init__(
        self,
        customer_id=None,
        line: Optional["CartLine"] = None,
        message: str = ERROR_CART_NOT_SAVED,
    ):
        super().__init__(message)
        self.customer_id = customer_id
        self.line = line


class Unauthorized(Exception):
    """Actor is not allowed to perform the requested action."""

    def __init__(self, action=None, message: str = ERROR_UNAUTHORIZED):
        super().__init__(message)
        self.action = action
