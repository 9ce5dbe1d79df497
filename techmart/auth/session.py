"""Web session utilities (in-memory)."""
import secrets
from datetime import datetime, timezone, timedelta
from typing import Dict, Optional

from techmart import config
from techmart.access import Actor

_web_sessions: Dict[str, dict] = {}


def create_session(actor: Actor) -> str:
    """Create a new session for an authenticated actor and return the token."""
    if not actor.is_authenticated:
        raise ValueError("Cannot create a session for an anonymous actor")
    session_token = secrets.token_urlsafe(32)
    now = datetime.now(timezone.utc)
    _web_sessions[session_token] = {
        "actor": actor.model_dump(mode="json"),
        "created_at": now.isoformat(),
        "expires_at": (now + timedelta(days=config.SESSION_TTL_DAYS)).isoformat(),
    }
    return session_token


def verify_session_token(token: str) -> Optional[Actor]:
    """Verify a session token and return its actor."""
    session = _web_sessions.get(token)
    if not session:
        return None

    expires_at = datetime.fromisoformat(session["expires_at"])
    if datetime.now(timezone.utc) > expires_at:
        del _web_sessions[token]
        return None

    return Actor.model_validate(session["actor"])


def revoke_session(token: str) -> Optional[Actor]:
    """Delete a session. Returns the actor it belonged to, if any."""
    session = _web_sessions.pop(token, None)
    if not session:
        return None
    return Actor.model_validate(session["actor"])
