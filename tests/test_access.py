"""Tests for the access control evaluator"""
import pytest
from pydantic import ValidationError

from techmart.access import (
    Action,
    Actor,
    PrivilegeBundle,
    Role,
    can_add_products,
    can_delete_products,
    can_manage_customers,
    can_manage_privileges,
    can_manage_users,
    can_update_products,
    can_view_admin_data,
    ensure_allowed,
    ensure_can_edit_privileges,
    is_allowed,
    permissions_for,
)
from techmart.errors import ERROR_ADMIN_PRIVILEGES_FIXED, Unauthorized


def staff(**flags):
    return Actor(id=2, role=Role.USER, privileges=PrivilegeBundle(**flags))


ADMIN = Actor(id=1, role=Role.ADMIN)
CUSTOMER = Actor(id=42, role=Role.CUSTOMER)
ANONYMOUS = Actor.anonymous()


class TestDecisionTable:
    """is_allowed across roles and bundles."""

    @pytest.mark.parametrize("action", list(Action))
    def test_admin_allowed_everything(self, action):
        assert is_allowed(ADMIN, action) is True

    @pytest.mark.parametrize("action", list(Action))
    def test_admin_ignores_bundle(self, action):
        """Admin with an all-false bundle is still allowed."""
        actor = Actor(id=1, role=Role.ADMIN, privileges=PrivilegeBundle())
        assert is_allowed(actor, action) is True

    @pytest.mark.parametrize("action", list(Action))
    def test_customer_denied_everything(self, action):
        assert is_allowed(CUSTOMER, action) is False

    @pytest.mark.parametrize("action", list(Action))
    def test_anonymous_denied_everything(self, action):
        assert is_allowed(ANONYMOUS, action) is False
        assert is_allowed(None, action) is False

    def test_user_add_only(self):
        """Staff with only can_add_products."""
        actor = staff(can_add_products=True)

        assert can_add_products(actor) is True
        assert can_update_products(actor) is False
        assert can_delete_products(actor) is False
        assert can_manage_users(actor) is False

    @pytest.mark.parametrize("flag,action", [
        ("can_add_products", Action.ADD_PRODUCTS),
        ("can_update_products", Action.UPDATE_PRODUCTS),
        ("can_delete_products", Action.DELETE_PRODUCTS),
    ])
    def test_each_flag_unlocks_only_its_action(self, flag, action):
        actor = staff(**{flag: True})
        product_actions = [Action.ADD_PRODUCTS, Action.UPDATE_PRODUCTS, Action.DELETE_PRODUCTS]

        for other in product_actions:
            assert is_allowed(actor, other) is (other == action)

    def test_user_without_bundle(self):
        """A missing bundle reads as all-false."""
        actor = Actor(id=2, role=Role.USER)

        for action in (Action.ADD_PRODUCTS, Action.UPDATE_PRODUCTS, Action.DELETE_PRODUCTS):
            assert is_allowed(actor, action) is False
            assert is_allowed(actor, action) == is_allowed(staff(), action)

    def test_user_staff_actions(self):
        actor = staff()

        assert can_manage_customers(actor) is True
        assert can_view_admin_data(actor) is True
        assert can_manage_users(actor) is False
        assert can_manage_privileges(actor) is False

    def test_full_bundle_still_not_admin(self):
        actor = staff(can_add_products=True, can_update_products=True, can_delete_products=True)

        assert can_manage_users(actor) is False
        assert can_manage_privileges(actor) is False

    def test_action_accepts_string_value(self):
        assert is_allowed(staff(can_delete_products=True), "delete_products") is True

    def test_unknown_action_rejected(self):
        with pytest.raises(ValueError):
            is_allowed(ADMIN, "launch_rockets")


class TestPrivilegeBundle:
    """Tests for PrivilegeBundle."""

    def test_defaults_false(self):
        bundle = PrivilegeBundle()

        assert bundle.model_dump() == {
            "can_add_products": False,
            "can_update_products": False,
            "can_delete_products": False,
        }

    def test_extra_keys_rejected(self):
        with pytest.raises(ValidationError):
            PrivilegeBundle(can_manage_users=True)

    def test_frozen(self):
        bundle = PrivilegeBundle()
        with pytest.raises(ValidationError):
            bundle.can_add_products = True


class TestActor:
    """Tests for Actor helpers."""

    def test_anonymous(self):
        assert ANONYMOUS.is_authenticated is False
        assert ANONYMOUS.is_staff is False
        assert ANONYMOUS.is_customer is False

    def test_roles(self):
        assert ADMIN.is_staff and not ADMIN.is_customer
        assert staff().is_staff
        assert CUSTOMER.is_customer and not CUSTOMER.is_staff

    def test_role_from_string(self):
        assert Actor(id=3, role="user").role == Role.USER


class TestPermissionsFor:
    def test_keys_cover_every_action(self):
        assert set(permissions_for(ADMIN)) == {action.value for action in Action}

    def test_matches_is_allowed(self):
        actor = staff(can_update_products=True)
        permissions = permissions_for(actor)

        for action in Action:
            assert permissions[action.value] == is_allowed(actor, action)


class TestGuards:
    """Tests for ensure_allowed and ensure_can_edit_privileges."""

    def test_ensure_allowed_passes(self):
        ensure_allowed(staff(can_add_products=True), Action.ADD_PRODUCTS)

    def test_ensure_allowed_raises(self):
        with pytest.raises(Unauthorized) as exc_info:
            ensure_allowed(staff(), Action.DELETE_PRODUCTS)

        assert exc_info.value.action == Action.DELETE_PRODUCTS

    def test_admin_edits_user_privileges(self):
        ensure_can_edit_privileges(ADMIN, Role.USER)

    def test_admin_privileges_not_editable(self):
        with pytest.raises(Unauthorized) as exc_info:
            ensure_can_edit_privileges(ADMIN, "admin")

        assert str(exc_info.value) == ERROR_ADMIN_PRIVILEGES_FIXED

    def test_user_cannot_edit_privileges(self):
        with pytest.raises(Unauthorized):
            ensure_can_edit_privileges(staff(can_add_products=True), Role.USER)
