# Overview: Permission category constants for grouping related permissions.


class PermissionCategory:
    """Permission categories for organization and UI display."""
    VIEWS = "VIEWS"
    SALES = "SALES"
    REPAIRS = "REPAIRS"
    INVENTORY = "INVENTORY"
    PURCHASING = "PURCHASING"
    PARTIES = "PARTIES"
    DOCUMENTS = "DOCUMENTS"
    USERS = "USERS"
