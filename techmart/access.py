"""
Access Control Evaluator.

Pure, synchronous allow/deny decisions for back-office and storefront
actions. Role ``admin`` overrides everything; staff with role ``user`` are
gated per action by their PrivilegeBundle; customers and anonymous actors
get no back-office rights.

Usage:
    from techmart.access import Actor, Action, Role, is_allowed

    actor = Actor(id=2, role=Role.USER, privileges=PrivilegeBundle(can_add_products=True))
    is_allowed(actor, Action.ADD_PRODUCTS)  # True
"""
from enum import Enum
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict

from techmart.errors import ERROR_ADMIN_PRIVILEGES_FIXED, Unauthorized
from techmart.logging import get_logger, sanitize_id_for_logging

logger = get_logger(__name__)


class Role(str, Enum):
    """Actor roles."""
    ADMIN = "admin"
    USER = "user"  # staff, gated by privileges
    CUSTOMER = "customer"


class Action(str, Enum):
    """Actions the presentation layer gates."""
    ADD_PRODUCTS = "add_products"
    UPDATE_PRODUCTS = "update_products"
    DELETE_PRODUCTS = "delete_products"
    MANAGE_USERS = "manage_users"
    MANAGE_CUSTOMERS = "manage_customers"
    VIEW_ADMIN_DATA = "view_admin_data"
    MANAGE_PRIVILEGES = "manage_privileges"


class PrivilegeBundle(BaseModel):
    """Per-user product privileges for staff with role ``user``."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    can_add_products: bool = False
    can_update_products: bool = False
    can_delete_products: bool = False


class Actor(BaseModel):
    """Whoever is making the request. ``role=None`` means unauthenticated."""
    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None
    role: Optional[Role] = None
    privileges: Optional[PrivilegeBundle] = None

    @classmethod
    def anonymous(cls) -> "Actor":
        return cls()

    @property
    def is_authenticated(self) -> bool:
        return self.role is not None

    @property
    def is_staff(self) -> bool:
        return self.role in (Role.ADMIN, Role.USER)

    @property
    def is_customer(self) -> bool:
        return self.role == Role.CUSTOMER


# Which bundle flag unlocks each product action for role "user"
_PRODUCT_PRIVILEGE_FLAGS: Dict[Action, str] = {
    Action.ADD_PRODUCTS: "can_add_products",
    Action.UPDATE_PRODUCTS: "can_update_products",
    Action.DELETE_PRODUCTS: "can_delete_products",
}

# Actions any staff member may perform regardless of bundle
_STAFF_ACTIONS = frozenset({Action.MANAGE_CUSTOMERS, Action.VIEW_ADMIN_DATA})


def is_allowed(actor: Optional[Actor], action: Union[Action, str]) -> bool:
    """
    Decide whether ``actor`` may perform ``action``.

    A missing bundle behaves exactly like an all-false bundle.
    """
    action = Action(action)
    if actor is None or not actor.is_staff:
        return False
    if actor.role == Role.ADMIN:
        return True

    # role == user from here on
    if action in _STAFF_ACTIONS:
        return True
    flag = _PRODUCT_PRIVILEGE_FLAGS.get(action)
    if flag is None or actor.privileges is None:
        return False
    return getattr(actor.privileges, flag) is True


def can_add_products(actor: Optional[Actor]) -> bool:
    return is_allowed(actor, Action.ADD_PRODUCTS)


def can_update_products(actor: Optional[Actor]) -> bool:
    return is_allowed(actor, Action.UPDATE_PRODUCTS)


def can_delete_products(actor: Optional[Actor]) -> bool:
    return is_allowed(actor, Action.DELETE_PRODUCTS)


def can_manage_users(actor: Optional[Actor]) -> bool:
    return is_allowed(actor, Action.MANAGE_USERS)


def can_manage_customers(actor: Optional[Actor]) -> bool:
    return is_allowed(actor, Action.MANAGE_CUSTOMERS)


def can_view_admin_data(actor: Optional[Actor]) -> bool:
    return is_allowed(actor, Action.VIEW_ADMIN_DATA)


def can_manage_privileges(actor: Optional[Actor]) -> bool:
    return is_allowed(actor, Action.MANAGE_PRIVILEGES)


def permissions_for(actor: Optional[Actor]) -> Dict[str, bool]:
    """All decisions for ``actor``, keyed by action value (for UI gating)."""
    return {action.value: is_allowed(actor, action) for action in Action}


def ensure_allowed(actor: Optional[Actor], action: Union[Action, str]) -> None:
    """Raise Unauthorized unless ``actor`` may perform ``action``."""
    action = Action(action)
    if not is_allowed(actor, action):
        actor_id = actor.id if actor else None
        logger.warning(
            f"Access denied: actor={sanitize_id_for_logging(actor_id)} action={action.value}"
        )
        raise Unauthorized(action)


def ensure_can_edit_privileges(actor: Optional[Actor], target_role: Union[Role, str]) -> None:
    """
    Guard for editing another staff member's PrivilegeBundle.

    Only admins may edit, and admins' own privileges are implicit so they
    are never editable.
    """
    ensure_allowed(actor, Action.MANAGE_PRIVILEGES)
    if Role(target_role) == Role.ADMIN:
        raise Unauthorized(Action.MANAGE_PRIVILEGES, message=ERROR_ADMIN_PRIVILEGES_FIXED)
