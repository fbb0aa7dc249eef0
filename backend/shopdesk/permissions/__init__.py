# Overview: Access policy package.
# Re-exports all public APIs so callers import from shopdesk.permissions.

from .categories import PermissionCategory
from .definitions import (
    PERMISSION_DEFINITIONS,
    VIEW_PERMISSIONS,
    SALES_PERMISSIONS,
    REPAIR_PERMISSIONS,
    INVENTORY_PERMISSIONS,
    PURCHASING_PERMISSIONS,
    PARTY_PERMISSIONS,
    DOCUMENT_PERMISSIONS,
    USER_PERMISSIONS,
    VIEW_CODES,
)
from .roles import DEFAULT_ROLE_PERMISSIONS, LANDING_VIEWS
from .helpers import (
    get_all_permission_codes,
    get_permissions_by_category,
    get_permission_definition,
    validate_permission_code,
    role_permissions,
    can_act,
    can_view,
    allowed_views,
    landing_view,
)

__all__ = [
    "PermissionCategory",
    "PERMISSION_DEFINITIONS",
    "VIEW_PERMISSIONS",
    "SALES_PERMISSIONS",
    "REPAIR_PERMISSIONS",
    "INVENTORY_PERMISSIONS",
    "PURCHASING_PERMISSIONS",
    "PARTY_PERMISSIONS",
    "DOCUMENT_PERMISSIONS",
    "USER_PERMISSIONS",
    "VIEW_CODES",
    "DEFAULT_ROLE_PERMISSIONS",
    "LANDING_VIEWS",
    "get_all_permission_codes",
    "get_permissions_by_category",
    "get_permission_definition",
    "validate_permission_code",
    "role_permissions",
    "can_act",
    "can_view",
    "allowed_views",
    "landing_view",
]
