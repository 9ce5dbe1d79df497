"""Staff User Repository - back-office account lookups."""
from typing import Optional

from techmart.services.models import StaffUser

from .base import BaseRepository


class UserRepository(BaseRepository):
    """Staff user database operations (``users`` table)."""

    async def get_by_id(self, user_id: int) -> Optional[StaffUser]:
        """Get staff user by ID."""
        result = await self.client.table("users").select("*").eq("id", user_id).execute()
        return StaffUser(**result.data[0]) if result.data else None
