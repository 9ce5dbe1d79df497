"""Tests for web sessions and auth helpers"""
from datetime import datetime, timedelta, timezone

import pytest

from techmart.access import Actor, PrivilegeBundle, Role
from techmart.auth import bearer_token, create_session, revoke_session, verify_session_token
from techmart.auth import session as session_module


def test_create_and_verify():
    actor = Actor(id=2, role=Role.USER, privileges=PrivilegeBundle(can_add_products=True))

    token = create_session(actor)

    assert verify_session_token(token) == actor


def test_unknown_token():
    assert verify_session_token("nope") is None


def test_anonymous_has_no_session():
    with pytest.raises(ValueError):
        create_session(Actor.anonymous())


def test_expired_session_removed():
    token = create_session(Actor(id=42, role=Role.CUSTOMER))
    expired = datetime.now(timezone.utc) - timedelta(seconds=1)
    session_module._web_sessions[token]["expires_at"] = expired.isoformat()

    assert verify_session_token(token) is None
    assert token not in session_module._web_sessions


def test_revoke():
    actor = Actor(id=42, role=Role.CUSTOMER)
    token = create_session(actor)

    assert revoke_session(token) == actor
    assert verify_session_token(token) is None
    assert revoke_session(token) is None


@pytest.mark.parametrize("header,expected", [
    ("Bearer abc", "abc"),
    ("bearer abc", "abc"),
    ("Token abc", None),
    ("Bearer", None),
    (None, None),
    ("", None),
])
def test_bearer_token(header, expected):
    assert bearer_token(header) == expected
