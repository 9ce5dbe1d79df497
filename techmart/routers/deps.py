"""
Shared Dependencies for Routers

Lazy-loaded repositories. Tests replace these via app.dependency_overrides.
"""

from techmart.db import get_supabase
from techmart.services.repositories import PrivilegeRepository, UserRepository


async def get_privilege_repository() -> PrivilegeRepository:
    return PrivilegeRepository(await get_supabase())


async def get_user_repository() -> UserRepository:
    return UserRepository(await get_supabase())
