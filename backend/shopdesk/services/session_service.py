# Overview: Login, session tokens and staff accounts.

"""
Session Token Management

Identity is a staff username plus the shop's shared login password
(SHOPDESK_LOGIN_PASSWORD). There are no per-user passwords.

SECURITY FEATURES:
- Cryptographically secure random tokens (32 bytes)
- Tokens hashed with SHA-256 before they are kept in the store
- 24-hour absolute timeout (SESSION_ABSOLUTE_TIMEOUT)
- 2-hour idle timeout (SESSION_IDLE_TIMEOUT)
- Revoked on logout and when the employee is removed

Logout clears the session only; the shop data stays as it is.
"""

from __future__ import annotations

import hashlib
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta

from ..models import Employee, Role
from ..permissions import landing_view
from ..store import ShopStore
from ..validation import ValidationError, require_choice, require_text
from .identifier_service import PREFIX_EMPLOYEE, next_record_id
from .permission_service import require_permission
from shopdesk.time_utils import utcnow


logger = logging.getLogger(__name__)


SESSION_ABSOLUTE_TIMEOUT = timedelta(hours=24)
SESSION_IDLE_TIMEOUT = timedelta(hours=2)


class AuthenticationError(Exception):
    """Unknown username or wrong password."""


@dataclass
class SessionRecord:
    employee_id: str
    created_at: datetime
    last_used_at: datetime
    expires_at: datetime


@dataclass
class SessionContext:
    """What an authenticated request knows about its actor."""
    employee: Employee
    session: SessionRecord

    @property
    def landing_view(self) -> str:
        return landing_view(self.employee.role)


def generate_token() -> str:
    """64-character hex token; only its hash is kept server-side."""
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _is_expired(record: SessionRecord, now: datetime) -> bool:
    return record.expires_at < now or now - record.last_used_at > SESSION_IDLE_TIMEOUT


def purge_expired_sessions(store: ShopStore) -> int:
    """Drop every expired or idle session. Returns how many were removed."""
    now = utcnow()
    stale = [h for h, rec in store.sessions.items() if _is_expired(rec, now)]
    for token_hash in stale:
        del store.sessions[token_hash]
    return len(stale)


def login(store: ShopStore, username: str | None, password: str | None, *, expected_password: str) -> tuple[SessionContext, str]:
    """
    Start a session for a staff member.

    Returns:
        (session context, plaintext token)

    Raises:
        AuthenticationError: Unknown username or wrong password
    """
    username = (username or "").strip()
    employee = next((e for e in store.employees if e.username == username), None)
    if employee is None or not secrets.compare_digest(password or "", expected_password):
        logger.warning("Failed login for username=%r", username)
        raise AuthenticationError("Invalid username or password")

    purged = purge_expired_sessions(store)
    if purged:
        logger.debug("Purged %d expired sessions", purged)

    token = generate_token()
    now = utcnow()
    record = SessionRecord(
        employee_id=employee.id,
        created_at=now,
        last_used_at=now,
        expires_at=now + SESSION_ABSOLUTE_TIMEOUT,
    )
    store.sessions[hash_token(token)] = record
    logger.info("Employee %s (%s) logged in", employee.id, employee.role)
    return SessionContext(employee=employee, session=record), token


def validate_session(store: ShopStore, token: str | None) -> SessionContext | None:
    """
    Resolve a bearer token to its session.

    Returns None (and drops the session) when the token is unknown,
    expired, idle too long, or its employee no longer exists.
    """
    if not token:
        return None
    token_hash = hash_token(token)
    record = store.sessions.get(token_hash)
    if record is None:
        return None

    now = utcnow()
    if _is_expired(record, now):
        del store.sessions[token_hash]
        return None

    employee = store.employees.find(record.employee_id)
    if employee is None:
        del store.sessions[token_hash]
        return None

    record.last_used_at = now
    return SessionContext(employee=employee, session=record)


def logout(store: ShopStore, token: str) -> bool:
    """Revoke one session. Returns False if it was not active."""
    return store.sessions.pop(hash_token(token), None) is not None


def revoke_employee_sessions(store: ShopStore, employee_id: str) -> int:
    hashes = [h for h, rec in store.sessions.items() if rec.employee_id == employee_id]
    for token_hash in hashes:
        del store.sessions[token_hash]
    return len(hashes)


def add_employee(
    store: ShopStore,
    actor: Employee,
    *,
    name: str | None,
    username: str | None,
    role: str = Role.SALES,
) -> Employee:
    """
    Raises:
        ValidationError: Missing name/username, unknown role, username taken
    """
    require_permission(actor, "MANAGE_EMPLOYEES")
    name = require_text(name, "name", label="Name")
    username = require_text(username, "username", label="Username")
    require_choice(role, "role", Role.all())
    if any(e.username == username for e in store.employees):
        raise ValidationError(f"Username '{username}' is already taken")

    employee = Employee(id=next_record_id(store, PREFIX_EMPLOYEE), name=name, role=role, username=username)
    # Staff list keeps creation order
    store.commit(store.employees.append(employee))
    logger.info("Employee %s (%s) added by %s", employee.id, role, actor.id)
    return employee


def delete_employee(store: ShopStore, actor: Employee, employee_id: str) -> None:
    """
    Remove a staff account and end its sessions. ADMIN accounts cannot be
    removed.

    Raises:
        RecordNotFoundError: Unknown employee
        ValidationError: Target is an ADMIN account
        PermissionDeniedError: Actor may not manage staff
    """
    require_permission(actor, "MANAGE_EMPLOYEES")
    employee = store.employees.get(employee_id)
    if employee.role == Role.ADMIN:
        raise ValidationError("Admin accounts cannot be removed")

    store.commit(store.employees.remove_by_id(employee_id))
    revoked = revoke_employee_sessions(store, employee_id)
    logger.info("Employee %s removed by %s (%d sessions revoked)", employee_id, actor.id, revoked)
