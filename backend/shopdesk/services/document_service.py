# Overview: Print projections for receipts and repair intake slips.

"""
Printable documents are plain dicts built from committed records. They
never feed back into the store; rendering them (HTML, PDF, thermal
printer) is left to the client.
"""

from __future__ import annotations

from ..models import Customer, Invoice, RepairTicket
from ..time_utils import to_utc_z
from .ledger_service import record_outstanding


SHOP_NAME = "ShopDesk"


def _customer_block(customer: Customer | None, fallback_name: str) -> dict:
    if customer is None:
        return {"name": fallback_name, "phone": "", "address": ""}
    return {"name": customer.name, "phone": customer.phone, "address": customer.address}


def build_receipt(invoice: Invoice, customer: Customer | None) -> dict:
    """
    Payment receipt for a sale invoice or a delivered repair ticket.

    The customer may be None (walk-in printed from an archived record);
    the name stored on the invoice is used instead.
    """
    receipt = {
        "document": "RECEIPT",
        "shop": SHOP_NAME,
        "number": invoice.id,
        "invoice_type": invoice.invoice_type,
        "date": to_utc_z(invoice.date),
        "warehouse": invoice.warehouse,
        "customer": _customer_block(customer, invoice.customer_name),
        "lines": [
            {
                "name": line.product_name,
                "quantity": line.quantity,
                "price": line.price,
                "amount": line.line_total,
            }
            for line in invoice.items
        ],
        "total_amount": invoice.total_amount,
        "paid_amount": invoice.paid_amount,
        "remaining": record_outstanding(invoice),
        "status": invoice.status,
        "note": invoice.note,
    }
    if isinstance(invoice, RepairTicket):
        receipt["device_name"] = invoice.device_info.device_name
        receipt["repair_status"] = invoice.repair_status
    receipt["sales_id"] = getattr(invoice, "sales_id", None)
    return receipt


def build_intake_slip(ticket: RepairTicket, customer: Customer | None) -> dict:
    """Slip handed to the customer when a device is checked in."""
    device = ticket.device_info
    return {
        "document": "REPAIR_INTAKE",
        "shop": SHOP_NAME,
        "number": ticket.id,
        "date": to_utc_z(ticket.date),
        "customer": _customer_block(customer, ticket.customer_name),
        "device": {
            "name": device.device_name,
            "model": device.model,
            "serial": device.serial,
            "password": device.password,
            "accessories": device.accessories,
            "appearance": device.appearance,
        },
        "symptoms": device.symptoms,
        "note": ticket.note,
        "repair_status": ticket.repair_status,
    }
