"""Authentication package."""
from .session import create_session, verify_session_token, revoke_session
from .dependencies import bearer_token, get_current_actor, require_customer, require_permission

__all__ = [
    "create_session",
    "verify_session_token",
    "revoke_session",
    "bearer_token",
    "get_current_actor",
    "require_customer",
    "require_permission",
]
