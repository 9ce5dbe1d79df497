"""
Router Pydantic Models

Request bodies for the cart and admin endpoints.
"""
from pydantic import BaseModel

from techmart.access import PrivilegeBundle


# ==================== CART MODELS ====================

class AddToCartRequest(BaseModel):
    product_id: int
    quantity: int = 1


class UpdateCartItemRequest(BaseModel):
    product_id: int
    quantity: int  # 0 removes the line


# ==================== ADMIN MODELS ====================

class UpdatePrivilegesRequest(PrivilegeBundle):
    pass
