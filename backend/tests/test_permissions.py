"""
Access policy tests.

Verifies:
- ADMIN holds every permission and every view
- TECHNICIAN and SALES hold their static sets
- Unknown roles, actions and views fail closed
"""

import pytest

from shopdesk.models import Employee, Role
from shopdesk.permissions import (
    VIEW_CODES, allowed_views, can_act, can_view, get_all_permission_codes,
    get_permission_definition, landing_view, role_permissions,
)
from shopdesk.services import permission_service


class TestAdmin:

    def test_admin_may_do_everything(self):
        assert all(can_act(Role.ADMIN, code) for code in get_all_permission_codes())

    def test_admin_sees_every_view(self):
        assert allowed_views(Role.ADMIN) == list(VIEW_CODES)


class TestRoles:

    @pytest.mark.parametrize("action", ["DIAGNOSE_REPAIR", "QUOTE_REPAIR", "COMPLETE_REPAIR", "CANCEL_REPAIR"])
    def test_sales_denied_technician_transitions(self, action):
        assert not can_act(Role.SALES, action)

    @pytest.mark.parametrize("action", ["DELIVER_REPAIR", "CREATE_SALE", "IMPORT_GOODS", "CANCEL_REPAIR"])
    def test_technician_denied_counter_work(self, action):
        assert not can_act(Role.TECHNICIAN, action)

    def test_both_may_approve_quote(self):
        assert can_act(Role.SALES, "APPROVE_REPAIR_QUOTE")
        assert can_act(Role.TECHNICIAN, "APPROVE_REPAIR_QUOTE")

    def test_technician_views(self):
        assert allowed_views(Role.TECHNICIAN) == ["REPAIR_TICKETS", "INVENTORY"]
        assert landing_view(Role.TECHNICIAN) == "REPAIR_TICKETS"

    @pytest.mark.parametrize("view", ["VAT_INVOICES", "EMPLOYEES"])
    def test_sales_hidden_admin_views(self, view):
        assert not can_view(Role.SALES, view)
        assert can_view(Role.ADMIN, view)


class TestFailClosed:

    def test_unknown_role(self):
        assert role_permissions("OWNER") == frozenset()
        assert not can_act("OWNER", "VIEW_DASHBOARD")

    def test_unknown_action_denied_even_for_admin(self):
        assert not can_act(Role.ADMIN, "LAUNCH_ROCKET")

    def test_unknown_view(self):
        assert not can_view(Role.ADMIN, "SETTINGS")

    def test_anonymous_actor(self):
        assert not permission_service.user_has_permission(None, "VIEW_DASHBOARD")


def test_permission_definition_lookup():
    definition = get_permission_definition("DELIVER_REPAIR")
    assert definition["category"] == "REPAIRS"
    assert get_permission_definition("NOPE") is None


def test_user_permissions_sorted():
    tech = Employee(id="e", name="T", role=Role.TECHNICIAN, username="t")
    perms = permission_service.get_user_permissions(tech)
    assert perms == sorted(perms)
    assert "DIAGNOSE_REPAIR" in perms
