# Overview: Service-layer enforcement of the access policy.

"""
Permission Checking

Every service entry point that changes state calls require_permission()
with the acting employee before touching the store. Route decorators use
the same predicate, so a check never differs between the HTTP surface and
direct service calls.

- Fail closed: unknown roles and unknown permission codes are denied.
- Denials are logged at WARNING; grants are not logged.
"""

from __future__ import annotations

import logging

from ..models import Employee
from ..permissions import can_act, role_permissions


logger = logging.getLogger(__name__)


class PermissionDeniedError(Exception):
    """Raised when an actor's role lacks the required permission."""

    def __init__(self, actor: Employee | None, permission_code: str):
        self.actor = actor
        self.permission_code = permission_code
        who = f"{actor.username} ({actor.role})" if actor else "anonymous"
        super().__init__(f"{who} lacks permission {permission_code}")


def user_has_permission(actor: Employee | None, permission_code: str) -> bool:
    if actor is None:
        return False
    return can_act(actor.role, permission_code)


def require_permission(actor: Employee | None, permission_code: str) -> None:
    """
    Raise PermissionDeniedError unless actor may perform permission_code.
    """
    if user_has_permission(actor, permission_code):
        return
    logger.warning(
        "Permission denied: actor=%s role=%s permission=%s",
        actor.id if actor else None,
        actor.role if actor else None,
        permission_code,
    )
    raise PermissionDeniedError(actor, permission_code)


def get_user_permissions(actor: Employee) -> list[str]:
    return sorted(role_permissions(actor.role))
