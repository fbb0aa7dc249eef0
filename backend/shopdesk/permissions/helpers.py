# Overview: Access policy predicates and permission lookups.

from ..models.auth import Role
from .definitions import PERMISSION_DEFINITIONS, VIEW_CODES
from .roles import DEFAULT_ROLE_PERMISSIONS, LANDING_VIEWS


def get_all_permission_codes():
    """Get list of all permission codes."""
    return [perm[0] for perm in PERMISSION_DEFINITIONS]


def get_permissions_by_category(category):
    """Get all permissions in a category."""
    return [perm for perm in PERMISSION_DEFINITIONS if perm[3] == category]


def get_permission_definition(code):
    """Get full definition for a permission code."""
    for perm in PERMISSION_DEFINITIONS:
        if perm[0] == code:
            return {
                "code": perm[0],
                "name": perm[1],
                "description": perm[2],
                "category": perm[3],
            }
    return None


def validate_permission_code(code):
    """Check if a permission code is valid."""
    return code in get_all_permission_codes()


def role_permissions(role: str) -> frozenset[str]:
    """Permission set for a role. Unknown roles get nothing."""
    if role == Role.ADMIN:
        return frozenset(get_all_permission_codes())
    return frozenset(DEFAULT_ROLE_PERMISSIONS.get(role, ()))


def can_act(role: str, action: str) -> bool:
    """
    Single access-policy predicate for actions.

    Unknown action codes are denied for every role, ADMIN included, so a
    typo in a caller fails closed.
    """
    if not validate_permission_code(action):
        return False
    return action in role_permissions(role)


def can_view(role: str, view: str) -> bool:
    code = VIEW_CODES.get(view)
    if code is None:
        return False
    return can_act(role, code)


def allowed_views(role: str) -> list[str]:
    return [view for view in VIEW_CODES if can_view(role, view)]


def landing_view(role: str) -> str:
    return LANDING_VIEWS.get(role, "DASHBOARD")
