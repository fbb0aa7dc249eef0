from .auth import Employee, Role
from .customers import Customer, Supplier, PartyKind
from .inventory import (
    Product, ProductType, Warehouse, PurchaseOrder, PurchaseOrderLine,
    PurchaseOrderStatus, SERVICE_STOCK_SENTINEL,
)
from .sales import (
    Invoice, SaleInvoice, RepairTicket, InvoiceLine, DeviceInfo,
    InvoiceType, PaymentStatus, RepairStatus, lines_total,
)
from .documents import VATInvoice, VATInvoiceLine, VATDirection, VATStatus, DEFAULT_TAX_RATE
from .ledger import DebtEvent

__all__ = [
    'Employee', 'Role',
    'Customer', 'Supplier', 'PartyKind',
    'Product', 'ProductType', 'Warehouse', 'PurchaseOrder', 'PurchaseOrderLine',
    'PurchaseOrderStatus', 'SERVICE_STOCK_SENTINEL',
    'Invoice', 'SaleInvoice', 'RepairTicket', 'InvoiceLine', 'DeviceInfo',
    'InvoiceType', 'PaymentStatus', 'RepairStatus', 'lines_total',
    'VATInvoice', 'VATInvoiceLine', 'VATDirection', 'VATStatus', 'DEFAULT_TAX_RATE',
    'DebtEvent',
]
