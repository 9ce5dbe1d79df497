"""
Admin Privileges Router

Read and edit the product privileges of back-office staff.
"""
from fastapi import APIRouter, Depends, HTTPException

from techmart.access import Action, Actor, PrivilegeBundle
from techmart.auth import require_permission
from techmart.errors import Unauthorized
from techmart.services.repositories import PrivilegeRepository, UserRepository
from .deps import get_privilege_repository, get_user_repository
from .models import UpdatePrivilegesRequest

router = APIRouter(tags=["admin-privileges"])


@router.get("/admin/users/{user_id}/privileges")
async def get_user_privileges(
    user_id: int,
    admin: Actor = Depends(require_permission(Action.MANAGE_PRIVILEGES)),
    users: UserRepository = Depends(get_user_repository),
    privileges: PrivilegeRepository = Depends(get_privilege_repository),
):
    """Current bundle (all false when the user has no record)."""
    user = await users.get_by_id(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    actor = await privileges.actor_for(user)
    bundle = actor.privileges or PrivilegeBundle()
    return {
        "user_id": user.id,
        "role": user.role,
        "has_record": actor.privileges is not None,
        "privileges": bundle.model_dump(),
    }


@router.put("/admin/users/{user_id}/privileges")
async def update_user_privileges(
    user_id: int,
    request: UpdatePrivilegesRequest,
    admin: Actor = Depends(require_permission(Action.MANAGE_PRIVILEGES)),
    users: UserRepository = Depends(get_user_repository),
    privileges: PrivilegeRepository = Depends(get_privilege_repository),
):
    """Replace a staff user's bundle."""
    user = await users.get_by_id(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    bundle = PrivilegeBundle(**request.model_dump())
    try:
        await privileges.upsert(admin, user, bundle)
    except Unauthorized as e:
        raise HTTPException(status_code=403, detail=str(e))
    return {"success": True, "user_id": user.id, "privileges": bundle.model_dump()}
