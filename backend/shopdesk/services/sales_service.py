# Overview: Counter sales (POS) and debt payment collection.

"""
Sales Service

- checkout() creates a SaleInvoice. The paid amount is capped at the total;
  anything above it is change handed back, not customer credit.
- collect_payment() records a later payment against any open invoice or
  repair ticket and re-derives the payment status. On a ticket that is not
  delivered yet it is a deposit, which delivery counts towards the total.
- cancel_invoice() voids a sale invoice; its outstanding amount leaves the
  customer's balance.
- Sales do NOT decrement stock (see inventory_service).

All writes go through invoice_service so the customer ledger stays exact.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..models import Customer, Employee, Invoice, PaymentStatus, SaleInvoice, Warehouse, lines_total
from ..store import ShopStore
from ..validation import ValidationError, coerce_int, require_choice
from .document_service import build_receipt
from .identifier_service import PREFIX_SALE, next_record_id
from .invoice_service import add_invoice, build_invoice_lines, update_invoice
from .ledger_service import derive_payment_status, record_outstanding
from .lifecycle_service import LifecycleError
from .permission_service import require_permission
from shopdesk.time_utils import utcnow


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentResult:
    invoice: Invoice
    customer: Customer
    receipt: dict
    change_due: int


def checkout(
    store: ShopStore,
    actor: Employee,
    *,
    customer_id: str | None,
    items,
    paid_amount=None,
    warehouse: str = Warehouse.TAY_PHAT,
    note: str = "",
) -> PaymentResult:
    """
    Create a counter sale.

    paid_amount defaults to the full total (cash sale). Less than the total
    leaves the remainder on the customer's debt.

    Raises:
        ValidationError: No customer, empty cart or bad amounts
        RecordNotFoundError: Unknown customer
        PermissionDeniedError: Actor may not sell
    """
    require_permission(actor, "CREATE_SALE")

    if not customer_id:
        raise ValidationError("Customer is required")
    require_choice(warehouse, "warehouse", Warehouse.all())
    lines = build_invoice_lines(store, items)
    if not lines:
        raise ValidationError("Cart is empty")

    customer = store.customers.get(customer_id)
    total = lines_total(lines)
    payment = total if paid_amount is None else coerce_int(paid_amount, "paid_amount")
    paid = min(payment, total)

    invoice = SaleInvoice(
        id=next_record_id(store, PREFIX_SALE),
        customer_id=customer.id,
        customer_name=customer.name,
        date=utcnow(),
        warehouse=warehouse,
        items=lines,
        total_amount=total,
        paid_amount=paid,
        status=derive_payment_status(total, paid),
        note=(note or "").strip(),
        sales_id=actor.id,
    )
    invoice, customer = add_invoice(store, invoice, actor_id=actor.id)
    return PaymentResult(
        invoice=invoice,
        customer=customer,
        receipt=build_receipt(invoice, customer),
        change_due=max(0, payment - total),
    )


def collect_payment(store: ShopStore, actor: Employee, invoice_id: str, amount) -> PaymentResult:
    """
    Record a debt payment against an existing invoice or repair ticket.

    Raises:
        ValidationError: Non-positive amount or nothing left to pay
        LifecycleError: Invoice is cancelled
        RecordNotFoundError: Unknown invoice
    """
    require_permission(actor, "COLLECT_PAYMENT")
    amount = coerce_int(amount, "amount", minimum=1)

    invoice = store.invoices.get(invoice_id)
    if invoice.is_cancelled:
        raise LifecycleError(f"Invoice {invoice_id} is cancelled")
    remaining = record_outstanding(invoice)
    if remaining == 0:
        raise ValidationError(f"Invoice {invoice_id} has nothing left to pay")

    paid = invoice.paid_amount + min(amount, remaining)
    updated, customer = update_invoice(
        store,
        invoice_id,
        actor_id=actor.id,
        paid_amount=paid,
        status=derive_payment_status(invoice.total_amount, paid),
    )
    logger.info("Payment of %d collected on %s by %s", min(amount, remaining), invoice_id, actor.id)
    return PaymentResult(
        invoice=updated,
        customer=customer,
        receipt=build_receipt(updated, customer),
        change_due=max(0, amount - remaining),
    )


def cancel_invoice(store: ShopStore, actor: Employee, invoice_id: str, reason: str | None = None) -> SaleInvoice:
    """
    Cancel a sale invoice. Repair tickets are cancelled through repair_service.

    Raises:
        LifecycleError: Already cancelled, or the id is a repair ticket
        RecordNotFoundError: Unknown invoice
    """
    require_permission(actor, "CANCEL_INVOICE")
    invoice = store.invoices.get(invoice_id)
    if not isinstance(invoice, SaleInvoice):
        raise LifecycleError(f"{invoice_id} is a repair ticket; cancel it from the repair workflow")
    if invoice.is_cancelled:
        raise LifecycleError(f"Invoice {invoice_id} is already cancelled")

    changes = {"status": PaymentStatus.CANCELLED}
    if reason and reason.strip():
        changes["note"] = f"{invoice.note}\n[Cancelled] {reason.strip()}".strip()
    updated, _ = update_invoice(store, invoice_id, actor_id=actor.id, **changes)
    logger.info("Invoice %s cancelled by %s", invoice_id, actor.id)
    return updated


def list_invoices(
    store: ShopStore,
    *,
    customer_id: str | None = None,
    invoice_type: str | None = None,
    status: str | None = None,
) -> list[Invoice]:
    """Invoices newest first, optionally filtered."""
    invoices = store.invoices.all()
    if customer_id:
        invoices = [inv for inv in invoices if inv.customer_id == customer_id]
    if invoice_type:
        invoices = [inv for inv in invoices if inv.invoice_type == invoice_type]
    if status:
        invoices = [inv for inv in invoices if inv.status == status]
    return sorted(invoices, key=lambda inv: inv.date, reverse=True)
