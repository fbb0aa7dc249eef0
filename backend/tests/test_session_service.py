"""
Login, session validation and staff management tests.
"""

from datetime import timedelta

import pytest

from shopdesk.models import Role
from shopdesk.services import session_service
from shopdesk.services.permission_service import PermissionDeniedError
from shopdesk.services.record_store import RecordNotFoundError
from shopdesk.services.session_service import AuthenticationError, hash_token
from shopdesk.validation import ValidationError


def _login(store, username="tech"):
    return session_service.login(store, username, "123", expected_password="123")


class TestLogin:

    def test_login_creates_hashed_session(self, bare_store):
        context, token = _login(bare_store)
        assert context.employee.username == "tech"
        assert context.landing_view == "REPAIR_TICKETS"
        assert token not in bare_store.sessions
        assert hash_token(token) in bare_store.sessions

    @pytest.mark.parametrize("username,password", [("tech", "wrong"), ("nobody", "123"), ("", "123"), ("tech", None)])
    def test_bad_credentials(self, bare_store, username, password):
        with pytest.raises(AuthenticationError):
            session_service.login(bare_store, username, password, expected_password="123")
        assert bare_store.sessions == {}

    def test_validate(self, bare_store):
        _, token = _login(bare_store)
        assert session_service.validate_session(bare_store, token).employee.id == "emp2"
        assert session_service.validate_session(bare_store, "forged") is None
        assert session_service.validate_session(bare_store, None) is None

    def test_idle_session_expires(self, bare_store):
        _, token = _login(bare_store)
        record = bare_store.sessions[hash_token(token)]
        record.last_used_at -= timedelta(hours=3)
        assert session_service.validate_session(bare_store, token) is None
        assert bare_store.sessions == {}

    def test_absolute_timeout(self, bare_store):
        _, token = _login(bare_store)
        bare_store.sessions[hash_token(token)].expires_at -= timedelta(hours=25)
        assert session_service.validate_session(bare_store, token) is None

    def test_login_sweeps_expired_sessions(self, bare_store):
        _, stale_idle = _login(bare_store, "sales")
        _, stale_absolute = _login(bare_store, "admin")
        _, live = _login(bare_store)
        bare_store.sessions[hash_token(stale_idle)].last_used_at -= timedelta(hours=3)
        bare_store.sessions[hash_token(stale_absolute)].expires_at -= timedelta(hours=25)

        _, fresh = _login(bare_store)
        assert set(bare_store.sessions) == {hash_token(live), hash_token(fresh)}

    def test_logout_keeps_data(self, bare_store):
        _, token = _login(bare_store)
        before = bare_store.snapshot()
        assert session_service.logout(bare_store, token)
        assert not session_service.logout(bare_store, token)
        assert bare_store.snapshot() == before


class TestEmployees:

    @pytest.fixture
    def admin(self, bare_store):
        return bare_store.employees.get("emp1")

    def test_add_employee_appends(self, bare_store, admin):
        employee = session_service.add_employee(bare_store, admin, name="Võ Kỹ Thuật", username="tech2", role=Role.TECHNICIAN)
        assert bare_store.employees.all()[-1] == employee
        assert employee.id == "EMP-0001"

    def test_username_taken(self, bare_store, admin):
        with pytest.raises(ValidationError):
            session_service.add_employee(bare_store, admin, name="X", username="sales")

    def test_unknown_role(self, bare_store, admin):
        with pytest.raises(ValidationError):
            session_service.add_employee(bare_store, admin, name="X", username="x", role="OWNER")

    def test_only_admin_manages_staff(self, bare_store):
        with pytest.raises(PermissionDeniedError):
            session_service.add_employee(bare_store, bare_store.employees.get("emp3"), name="X", username="x")

    def test_delete_revokes_sessions(self, bare_store, admin):
        _, token = _login(bare_store, "sales")
        session_service.delete_employee(bare_store, admin, "emp3")
        assert bare_store.employees.find("emp3") is None
        assert session_service.validate_session(bare_store, token) is None

    def test_admin_cannot_be_removed(self, bare_store, admin):
        with pytest.raises(ValidationError):
            session_service.delete_employee(bare_store, admin, "emp1")

    def test_delete_unknown(self, bare_store, admin):
        with pytest.raises(RecordNotFoundError):
            session_service.delete_employee(bare_store, admin, "ghost")
