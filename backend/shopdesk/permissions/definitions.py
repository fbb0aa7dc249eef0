# Overview: All permission definitions organized by category.
# Each permission is defined as: (code, name, description, category)

from .categories import PermissionCategory


# -- VIEWS (one per screen of the shop front end) --

VIEW_PERMISSIONS = [
    ("VIEW_DASHBOARD", "Dashboard", "Revenue and workload overview", PermissionCategory.VIEWS),
    ("VIEW_POS", "Point of Sale", "Counter checkout screen", PermissionCategory.VIEWS),
    ("VIEW_REPAIR_TICKETS", "Repair Tickets", "Repair intake and workflow board", PermissionCategory.VIEWS),
    ("VIEW_INVENTORY", "Inventory", "Product catalogue and stock per warehouse", PermissionCategory.VIEWS),
    ("VIEW_IMPORT_GOODS", "Import Goods", "Purchase order entry", PermissionCategory.VIEWS),
    ("VIEW_STOCK_REPORT", "Stock Report", "Import / export / on-hand summary", PermissionCategory.VIEWS),
    ("VIEW_DEBT", "Debt & Invoices", "Customer debt and invoice history", PermissionCategory.VIEWS),
    ("VIEW_VAT_INVOICES", "VAT Invoices", "Red invoice capture and filtering", PermissionCategory.VIEWS),
    ("VIEW_CUSTOMERS", "Customers", "Customer list", PermissionCategory.VIEWS),
    ("VIEW_SUPPLIERS", "Suppliers", "Supplier list", PermissionCategory.VIEWS),
    ("VIEW_EMPLOYEES", "Employees", "Staff list", PermissionCategory.VIEWS),
]


# -- SALES --

SALES_PERMISSIONS = [
    (
        "CREATE_SALE",
        "Create Sale",
        "Check out a counter sale (POS)",
        PermissionCategory.SALES,
    ),
    (
        "COLLECT_PAYMENT",
        "Collect Payment",
        "Record a debt payment against an existing invoice",
        PermissionCategory.SALES,
    ),
    (
        "CANCEL_INVOICE",
        "Cancel Invoice",
        "Cancel a sale invoice and release its debt",
        PermissionCategory.SALES,
    ),
]


# -- REPAIRS (one per workflow transition) --

REPAIR_PERMISSIONS = [
    (
        "CREATE_REPAIR_TICKET",
        "Receive Device",
        "Create a repair ticket at intake",
        PermissionCategory.REPAIRS,
    ),
    (
        "SAVE_REPAIR_TICKET",
        "Save Ticket",
        "Save diagnosis, notes and line items without changing status",
        PermissionCategory.REPAIRS,
    ),
    (
        "DIAGNOSE_REPAIR",
        "Diagnose",
        "Record a diagnosis (RECEIVED -> CHECKING)",
        PermissionCategory.REPAIRS,
    ),
    (
        "QUOTE_REPAIR",
        "Send Quote",
        "Quote parts and labour (CHECKING -> QUOTING)",
        PermissionCategory.REPAIRS,
    ),
    (
        "APPROVE_REPAIR_QUOTE",
        "Customer Approved",
        "Record customer approval of the quote (QUOTING -> IN_PROGRESS)",
        PermissionCategory.REPAIRS,
    ),
    (
        "COMPLETE_REPAIR",
        "Mark Finished",
        "Report the repair as done (IN_PROGRESS -> COMPLETED)",
        PermissionCategory.REPAIRS,
    ),
    (
        "DELIVER_REPAIR",
        "Confirm Payment & Deliver",
        "Take payment and hand the device back (COMPLETED -> DELIVERED)",
        PermissionCategory.REPAIRS,
    ),
    (
        "CANCEL_REPAIR",
        "Cancel Ticket",
        "Cancel an open repair ticket",
        PermissionCategory.REPAIRS,
    ),
]


# -- INVENTORY & PURCHASING --

INVENTORY_PERMISSIONS = [
    (
        "MANAGE_PRODUCTS",
        "Manage Products",
        "Add or update catalogue entries",
        PermissionCategory.INVENTORY,
    ),
]

PURCHASING_PERMISSIONS = [
    (
        "IMPORT_GOODS",
        "Import Goods",
        "Confirm a purchase order: stock in and supplier debt",
        PermissionCategory.PURCHASING,
    ),
]


# -- PARTIES --

PARTY_PERMISSIONS = [
    (
        "MANAGE_CUSTOMERS",
        "Manage Customers",
        "Create customers",
        PermissionCategory.PARTIES,
    ),
    (
        "MANAGE_SUPPLIERS",
        "Manage Suppliers",
        "Create suppliers",
        PermissionCategory.PARTIES,
    ),
    (
        "RECONCILE_BALANCES",
        "Reconcile Balances",
        "Recompute a party balance from its records",
        PermissionCategory.PARTIES,
    ),
]


# -- DOCUMENTS --

DOCUMENT_PERMISSIONS = [
    (
        "MANAGE_VAT_INVOICES",
        "Manage VAT Invoices",
        "Create, edit and mark VAT invoices as synced",
        PermissionCategory.DOCUMENTS,
    ),
    (
        "PARSE_DOCUMENTS",
        "Parse Documents",
        "Extract VAT invoice drafts with the document intelligence service",
        PermissionCategory.DOCUMENTS,
    ),
    (
        "CONFIGURE_AI",
        "Configure AI Connection",
        "Check the AI service API key",
        PermissionCategory.DOCUMENTS,
    ),
]


# -- USERS --

USER_PERMISSIONS = [
    (
        "MANAGE_EMPLOYEES",
        "Manage Employees",
        "Add and remove staff accounts",
        PermissionCategory.USERS,
    ),
]


PERMISSION_DEFINITIONS = (
    VIEW_PERMISSIONS
    + SALES_PERMISSIONS
    + REPAIR_PERMISSIONS
    + INVENTORY_PERMISSIONS
    + PURCHASING_PERMISSIONS
    + PARTY_PERMISSIONS
    + DOCUMENT_PERMISSIONS
    + USER_PERMISSIONS
)


# Screen identifiers used by the front end, mapped to their view permission.
VIEW_CODES = {
    "DASHBOARD": "VIEW_DASHBOARD",
    "POS": "VIEW_POS",
    "REPAIR_TICKETS": "VIEW_REPAIR_TICKETS",
    "INVENTORY": "VIEW_INVENTORY",
    "IMPORT_GOODS": "VIEW_IMPORT_GOODS",
    "STOCK_REPORT": "VIEW_STOCK_REPORT",
    "DEBT": "VIEW_DEBT",
    "VAT_INVOICES": "VIEW_VAT_INVOICES",
    "CUSTOMERS": "VIEW_CUSTOMERS",
    "SUPPLIERS": "VIEW_SUPPLIERS",
    "EMPLOYEES": "VIEW_EMPLOYEES",
}
