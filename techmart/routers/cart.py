"""
Cart Router

Storefront cart endpoints. Money is returned as 2-place strings so the
client never re-does float math.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from techmart.access import Actor
from techmart.cart import CartManager, get_cart_registry
from techmart.errors import (
    InsufficientStock,
    NotAuthenticated,
    PersistenceFailure,
    ProductUnavailable,
)
from techmart.auth import require_customer
from techmart.logging import get_logger, sanitize_id_for_logging
from techmart.services.money import format_money
from .models import AddToCartRequest, UpdateCartItemRequest

logger = get_logger(__name__)

router = APIRouter(tags=["cart"])


async def get_customer_cart(actor: Actor = Depends(require_customer)) -> CartManager:
    """Bound cart manager for the signed-in customer."""
    try:
        return await get_cart_registry().for_customer(actor.id)
    except PersistenceFailure as e:
        raise HTTPException(status_code=503, detail=str(e))


async def _format_cart_response(cart: CartManager, warning: Optional[str] = None) -> dict:
    """Lines joined with products plus derived totals."""
    views = await cart.get_lines_with_products()
    totals = await cart.get_derived_totals()
    response = {
        "customer_id": cart.customer_id,
        "items": [view.to_dict() for view in views],
        "totals": totals.to_dict(),
        "total_display": format_money(totals.total),
        "free_shipping": totals.free_shipping,
    }
    if warning:
        response["warning"] = warning
    return response


def _raise_for_cart_error(e: Exception) -> None:
    """Translate engine errors into HTTP errors with the user-facing reason."""
    if isinstance(e, NotAuthenticated):
        raise HTTPException(status_code=401, detail=str(e))
    if isinstance(e, ProductUnavailable):
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, InsufficientStock):
        raise HTTPException(
            status_code=409,
            detail={"message": str(e), "available": e.available, "requested": e.requested},
        )
    if isinstance(e, ValueError):
        raise HTTPException(status_code=400, detail=str(e))
    raise e


@router.get("/cart")
async def get_cart(cart: CartManager = Depends(get_customer_cart)):
    """Get the customer's cart with current prices and totals."""
    return await _format_cart_response(cart)


@router.get("/cart/count")
async def get_cart_count(cart: CartManager = Depends(get_customer_cart)):
    """Badge count for the header."""
    return {"count": cart.item_count}


@router.post("/cart/add")
async def add_to_cart(request: AddToCartRequest, cart: CartManager = Depends(get_customer_cart)):
    """Add item to cart (increments an existing line)."""
    warning = None
    try:
        await cart.add_item(request.product_id, request.quantity)
    except PersistenceFailure as e:
        warning = str(e)
    except (NotAuthenticated, ProductUnavailable, InsufficientStock, ValueError) as e:
        _raise_for_cart_error(e)
    return await _format_cart_response(cart, warning)


@router.put("/cart/update")
async def update_cart_item(request: UpdateCartItemRequest, cart: CartManager = Depends(get_customer_cart)):
    """Update cart item quantity (0 = remove)."""
    warning = None
    try:
        await cart.update_quantity(request.product_id, request.quantity)
    except PersistenceFailure as e:
        warning = str(e)
    except (NotAuthenticated, ProductUnavailable, InsufficientStock, ValueError) as e:
        _raise_for_cart_error(e)
    return await _format_cart_response(cart, warning)


@router.delete("/cart/remove")
async def remove_cart_item(product_id: int, cart: CartManager = Depends(get_customer_cart)):
    """Remove item from cart. Unknown products are ignored."""
    warning = None
    try:
        await cart.remove_item(product_id)
    except PersistenceFailure as e:
        warning = str(e)
    return await _format_cart_response(cart, warning)


@router.delete("/cart")
async def clear_cart(cart: CartManager = Depends(get_customer_cart)):
    """Empty the cart."""
    warning = None
    try:
        await cart.clear()
    except PersistenceFailure as e:
        warning = str(e)
    logger.info(f"Cart cleared for customer {sanitize_id_for_logging(cart.customer_id)}")
    return await _format_cart_response(cart, warning)
