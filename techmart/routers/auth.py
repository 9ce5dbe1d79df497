"""
Session Router

Logout and the permission map the UI uses to show or hide controls.
Login itself is handled by the external auth backend, which calls
``create_session`` once credentials check out.
"""
from fastapi import APIRouter, Depends, Header

from techmart.access import Actor, permissions_for
from techmart.auth import bearer_token, get_current_actor, revoke_session
from techmart.cart import get_cart_registry
from techmart.logging import get_logger, sanitize_id_for_logging

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])


@router.get("/me/permissions")
async def get_my_permissions(actor: Actor = Depends(get_current_actor)):
    """Every access decision for the current actor."""
    return {
        "authenticated": actor.is_authenticated,
        "role": actor.role.value if actor.role else None,
        "permissions": permissions_for(actor),
    }


@router.post("/auth/logout")
async def logout(authorization: str = Header(None, alias="Authorization")):
    """End the session. A customer's stored cart survives for the next login."""
    token = bearer_token(authorization)
    actor = revoke_session(token) if token else None
    if actor is not None and actor.is_customer:
        await get_cart_registry().release(actor.id)
        logger.info(f"Customer {sanitize_id_for_logging(actor.id)} logged out")
    return {"success": True}
