"""HTTP routers exposing the cart and access engines."""
from .admin import router as admin_router
from .auth import router as auth_router
from .cart import router as cart_router

__all__ = ["admin_router", "auth_router", "cart_router"]
