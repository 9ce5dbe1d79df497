"""Product Repository - catalog lookups used by the cart."""
from typing import Optional

from techmart.services.models import Product

from .base import BaseRepository


class ProductRepository(BaseRepository):
    """Supabase-backed catalog (``products`` table)."""

    async def get_product_by_id(self, product_id: int) -> Optional[Product]:
        """Get product by ID, None if it no longer exists."""
        result = await self.client.table("products").select("*").eq("id", product_id).execute()
        return Product(**result.data[0]) if result.data else None
