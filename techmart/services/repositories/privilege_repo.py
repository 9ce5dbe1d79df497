"""Privilege Repository - per-user product privileges (``user_privileges`` table).

All methods use async/await with supabase-py v2.
"""

from datetime import UTC, datetime
from typing import Optional

from techmart.access import Actor, PrivilegeBundle, ensure_can_edit_privileges
from techmart.logging import get_logger, sanitize_id_for_logging
from techmart.services.models import StaffUser

from .base import BaseRepository

logger = get_logger(__name__)

_BUNDLE_FIELDS = tuple(PrivilegeBundle.model_fields)


class PrivilegeRepository(BaseRepository):
    """Privilege bundle lookups and admin edits."""

    async def get_for_user(self, user_id: int) -> Optional[PrivilegeBundle]:
        """Get the user's bundle, None when no record exists."""
        result = (
            await self.client.table("user_privileges").select("*").eq("user_id", user_id).execute()
        )
        if not result.data:
            return None
        row = result.data[0]
        return PrivilegeBundle(**{name: bool(row.get(name)) for name in _BUNDLE_FIELDS})

    async def actor_for(self, user: StaffUser) -> Actor:
        """Build the Actor for a signed-in staff member."""
        privileges = None
        if user.role != "admin":
            privileges = await self.get_for_user(user.id)
        return Actor(id=user.id, role=user.role, privileges=privileges)

    async def upsert(self, editor: Actor, target: StaffUser, bundle: PrivilegeBundle) -> PrivilegeBundle:
        """Create or replace ``target``'s bundle. Admin only, never for admin targets."""
        ensure_can_edit_privileges(editor, target.role)

        data = {
            "user_id": target.id,
            **bundle.model_dump(),
            "updated_at": datetime.now(UTC).isoformat(),
        }
        await self.client.table("user_privileges").upsert(data, on_conflict="user_id").execute()
        logger.info(
            f"Privileges updated for user {sanitize_id_for_logging(target.id)} "
            f"by {sanitize_id_for_logging(editor.id)}"
        )
        return bundle
