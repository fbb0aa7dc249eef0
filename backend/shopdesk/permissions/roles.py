# Overview: Default permission sets per role.
# ADMIN is not listed here: it holds every permission (see helpers.role_permissions).

from ..models.auth import Role


DEFAULT_ROLE_PERMISSIONS = {
    Role.TECHNICIAN: {
        "VIEW_REPAIR_TICKETS",
        "VIEW_INVENTORY",
        "CREATE_REPAIR_TICKET",
        "SAVE_REPAIR_TICKET",
        "DIAGNOSE_REPAIR",
        "QUOTE_REPAIR",
        "APPROVE_REPAIR_QUOTE",
        "COMPLETE_REPAIR",
    },
    Role.SALES: {
        "VIEW_DASHBOARD",
        "VIEW_POS",
        "VIEW_REPAIR_TICKETS",
        "VIEW_INVENTORY",
        "VIEW_IMPORT_GOODS",
        "VIEW_STOCK_REPORT",
        "VIEW_DEBT",
        "VIEW_CUSTOMERS",
        "VIEW_SUPPLIERS",
        "CREATE_SALE",
        "COLLECT_PAYMENT",
        "CREATE_REPAIR_TICKET",
        "SAVE_REPAIR_TICKET",
        "APPROVE_REPAIR_QUOTE",
        "DELIVER_REPAIR",
        "IMPORT_GOODS",
        "MANAGE_CUSTOMERS",
        "MANAGE_SUPPLIERS",
    },
}

# Screen a role lands on after login.
LANDING_VIEWS = {
    Role.ADMIN: "DASHBOARD",
    Role.TECHNICIAN: "REPAIR_TICKETS",
    Role.SALES: "DASHBOARD",
}
