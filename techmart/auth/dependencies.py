"""FastAPI dependencies resolving the request's Actor."""
from typing import Optional

from fastapi import Depends, Header, HTTPException

from techmart.access import Action, Actor, is_allowed
from techmart.errors import ERROR_NOT_AUTHENTICATED, ERROR_UNAUTHORIZED
from techmart.logging import get_logger, sanitize_id_for_logging
from .session import verify_session_token

logger = get_logger(__name__)


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


async def get_current_actor(
    authorization: str = Header(None, alias="Authorization"),
) -> Actor:
    """Actor for the request; anonymous when the header is missing or invalid."""
    token = bearer_token(authorization)
    if not token:
        return Actor.anonymous()
    actor = verify_session_token(token)
    return actor if actor is not None else Actor.anonymous()


async def require_customer(actor: Actor = Depends(get_current_actor)) -> Actor:
    """Only signed-in customers have a cart."""
    if not actor.is_customer:
        raise HTTPException(status_code=401, detail=ERROR_NOT_AUTHENTICATED)
    return actor


def require_permission(action: Action):
    """Dependency factory: 403 unless the actor may perform ``action``."""

    async def _check(actor: Actor = Depends(get_current_actor)) -> Actor:
        if not is_allowed(actor, action):
            logger.warning(
                f"Access denied: actor={sanitize_id_for_logging(actor.id)} action={action.value}"
            )
            raise HTTPException(status_code=403, detail=ERROR_UNAUTHORIZED)
        return actor

    return _check
