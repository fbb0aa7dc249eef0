# Overview: Repair ticket operations: intake, saves, transitions, delivery, cancellation.

"""
Repair Service

Applies lifecycle_service decisions to the store. Every operation:
1. Loads the ticket (RecordNotFoundError if absent or not a repair ticket)
2. Computes the target status with the pure next_status()
3. Checks the actor's permission for that exact transition
4. Writes through invoice_service, which posts the debt change once

Nothing is written until every check has passed, so a rejected operation
leaves the store exactly as it was.

DELIVERY is one atomic finalize: the ticket is committed as DELIVERED with
its payment, the ledger is posted, and only then is the receipt built from
the committed record.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass

from ..models import (
    Customer, DeviceInfo, Employee, PaymentStatus, RepairStatus, RepairTicket,
    Role, Warehouse, lines_total,
)
from ..permissions import can_act
from ..store import ShopStore
from ..validation import ValidationError, coerce_int, require_choice, require_text
from .document_service import build_intake_slip, build_receipt
from .identifier_service import PREFIX_REPAIR, next_record_id
from .invoice_service import add_invoice, build_invoice_lines, update_invoice
from .ledger_service import derive_payment_status, record_outstanding
from .lifecycle_service import (
    EVENT_LABELS, SAVE_PERMISSION, LifecycleError, RepairEvent, TicketSnapshot,
    available_events, next_status, required_permission,
)
from .permission_service import require_permission
from .record_store import RecordNotFoundError
from shopdesk.time_utils import utcnow


logger = logging.getLogger(__name__)


class TicketTab:
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @classmethod
    def all(cls) -> list[str]:
        return [cls.ACTIVE, cls.COMPLETED, cls.CANCELLED]


@dataclass(frozen=True)
class DeliveryResult:
    """Everything the counter needs after handing a repaired device back."""
    ticket: RepairTicket
    customer: Customer
    receipt: dict
    change_due: int
    debt_delta: int


def get_ticket(store: ShopStore, ticket_id: str) -> RepairTicket:
    record = store.invoices.find(ticket_id)
    if not isinstance(record, RepairTicket):
        raise RecordNotFoundError("repair_tickets", ticket_id)
    return record


def create_ticket(
    store: ShopStore,
    actor: Employee,
    *,
    customer_id: str | None,
    device_info: dict | None,
    note: str = "",
    warehouse: str = Warehouse.TAY_PHAT,
) -> tuple[RepairTicket, dict]:
    """
    Check a device in for repair.

    Returns:
        (ticket, intake slip)

    Raises:
        ValidationError: Missing customer or device name
        RecordNotFoundError: Unknown customer id
        PermissionDeniedError: Actor may not create tickets
    """
    require_permission(actor, "CREATE_REPAIR_TICKET")

    if not customer_id:
        raise ValidationError("Customer is required")
    device_info = device_info or {}
    device_name = require_text(device_info.get("device_name"), "device_name", label="Device name")
    require_choice(warehouse, "warehouse", Warehouse.all())

    customer = store.customers.get(customer_id)

    ticket = RepairTicket(
        id=next_record_id(store, PREFIX_REPAIR),
        customer_id=customer.id,
        customer_name=customer.name,
        date=utcnow(),
        warehouse=warehouse,
        status=PaymentStatus.UNPAID,
        note=(note or "").strip(),
        repair_status=RepairStatus.RECEIVED,
        device_info=DeviceInfo(
            device_name=device_name,
            symptoms=(device_info.get("symptoms") or "").strip(),
            model=(device_info.get("model") or "").strip(),
            serial=(device_info.get("serial") or "").strip(),
            password=device_info.get("password") or "",
            accessories=(device_info.get("accessories") or "").strip(),
            appearance=(device_info.get("appearance") or "").strip(),
        ),
    )
    ticket, customer = add_invoice(store, ticket, actor_id=actor.id)
    logger.info("Repair ticket %s received from %s by %s", ticket.id, customer.id, actor.id)
    return ticket, build_intake_slip(ticket, customer)


def save_ticket(
    store: ShopStore,
    actor: Employee,
    ticket_id: str,
    *,
    items=None,
    diagnosis: str | None = None,
    note: str | None = None,
    event: str = RepairEvent.SAVE,
) -> RepairTicket:
    """
    Persist a ticket draft and apply a lifecycle event.

    items is a list of {product_id, quantity, price?}; None keeps the
    current lines. diagnosis / note of None keep the current values.

    SAVE may escalate RECEIVED -> CHECKING or CHECKING -> QUOTING; the
    actor needs the permission for whichever transition fires. DELIVER and
    CANCEL have their own entry points.

    Raises:
        LifecycleError: Event not allowed from the current status
        PermissionDeniedError: Actor may not perform the resulting transition
        ValidationError: Malformed line items
    """
    if event in (RepairEvent.DELIVER, RepairEvent.CANCEL):
        raise LifecycleError(f"{event} is not a save event")

    ticket = get_ticket(store, ticket_id)
    lines = ticket.items if items is None else build_invoice_lines(store, items)
    new_diagnosis = ticket.device_info.diagnosis if diagnosis is None else diagnosis.strip()

    current = ticket.repair_status
    target = next_status(current, event, TicketSnapshot(new_diagnosis, len(lines)))

    if event == RepairEvent.SAVE:
        require_permission(actor, SAVE_PERMISSION)
    if target != current:
        require_permission(actor, required_permission(current, target))

    total = lines_total(lines)
    changes = {
        "items": lines,
        "total_amount": total,
        "note": ticket.note if note is None else note.strip(),
        "repair_status": target,
        "device_info": dataclasses.replace(ticket.device_info, diagnosis=new_diagnosis),
    }
    if ticket.paid_amount > 0 and not ticket.is_cancelled:
        changes["status"] = derive_payment_status(total, ticket.paid_amount)
    if target == RepairStatus.CHECKING and actor.role == Role.TECHNICIAN and not ticket.technician_id:
        changes["technician_id"] = actor.id

    updated, _ = update_invoice(store, ticket_id, actor_id=actor.id, **changes)
    if target != current:
        logger.info("Repair ticket %s %s -> %s by %s", ticket_id, current, target, actor.id)
    return updated


def send_quote(store: ShopStore, actor: Employee, ticket_id: str, **draft) -> RepairTicket:
    return save_ticket(store, actor, ticket_id, event=RepairEvent.SEND_QUOTE, **draft)


def approve_quote(store: ShopStore, actor: Employee, ticket_id: str, **draft) -> RepairTicket:
    return save_ticket(store, actor, ticket_id, event=RepairEvent.APPROVE_QUOTE, **draft)


def mark_finished(store: ShopStore, actor: Employee, ticket_id: str, **draft) -> RepairTicket:
    return save_ticket(store, actor, ticket_id, event=RepairEvent.MARK_FINISHED, **draft)


def propose_payment(store: ShopStore, ticket_id: str, items=None) -> int:
    """Default payment offered at delivery: recomputed total less any deposit."""
    ticket = get_ticket(store, ticket_id)
    lines = ticket.items if items is None else build_invoice_lines(store, items)
    return max(0, lines_total(lines) - ticket.paid_amount)


def confirm_delivery(
    store: ShopStore,
    actor: Employee,
    ticket_id: str,
    payment_amount=None,
    *,
    items=None,
    diagnosis: str | None = None,
    note: str | None = None,
) -> DeliveryResult:
    """
    Take payment and hand the device back (COMPLETED -> DELIVERED).

    A deposit already taken with sales_service.collect_payment counts
    towards the total. payment_amount defaults to what is still due; the
    stored paid amount is capped at the total and any excess is returned
    as change_due.

    Raises:
        LifecycleError: Ticket is not COMPLETED
        PermissionDeniedError: Actor may not deliver
        ValidationError: Bad payment amount or line items
    """
    ticket = get_ticket(store, ticket_id)
    target = next_status(ticket.repair_status, RepairEvent.DELIVER)
    require_permission(actor, required_permission(ticket.repair_status, target))

    lines = ticket.items if items is None else build_invoice_lines(store, items)
    total = lines_total(lines)
    due = max(0, total - ticket.paid_amount)
    payment = due if payment_amount is None else coerce_int(payment_amount, "payment_amount")
    paid = min(ticket.paid_amount + payment, total)

    updated, customer = update_invoice(
        store,
        ticket_id,
        actor_id=actor.id,
        items=lines,
        total_amount=total,
        paid_amount=paid,
        status=derive_payment_status(total, paid),
        repair_status=target,
        sales_id=actor.id,
        note=ticket.note if note is None else note.strip(),
        device_info=dataclasses.replace(
            ticket.device_info,
            diagnosis=ticket.device_info.diagnosis if diagnosis is None else diagnosis.strip(),
        ),
    )

    logger.info(
        "Repair ticket %s delivered by %s total=%d paid=%d status=%s",
        ticket_id, actor.id, total, paid, updated.status,
    )
    return DeliveryResult(
        ticket=updated,
        customer=customer,
        receipt=build_receipt(updated, customer),
        change_due=max(0, ticket.paid_amount + payment - total),
        debt_delta=record_outstanding(updated) - record_outstanding(ticket),
    )


def cancel_ticket(store: ShopStore, actor: Employee, ticket_id: str, reason: str | None = None) -> RepairTicket:
    """
    Cancel a ticket from any non-terminal status. Its debt drops to zero.

    Raises:
        LifecycleError: Ticket already DELIVERED or CANCELLED
        PermissionDeniedError: Actor is not allowed to cancel
    """
    ticket = get_ticket(store, ticket_id)
    target = next_status(ticket.repair_status, RepairEvent.CANCEL)
    require_permission(actor, required_permission(ticket.repair_status, target))

    changes = {"repair_status": target, "status": PaymentStatus.CANCELLED}
    if reason and reason.strip():
        changes["note"] = f"{ticket.note}\n[Cancelled] {reason.strip()}".strip()

    updated, _ = update_invoice(store, ticket_id, actor_id=actor.id, **changes)
    logger.info("Repair ticket %s cancelled by %s", ticket_id, actor.id)
    return updated


def list_tickets(store: ShopStore, tab: str = TicketTab.ACTIVE) -> list[RepairTicket]:
    """Tickets for one tab, newest first."""
    require_choice(tab, "tab", TicketTab.all())
    tickets = [inv for inv in store.invoices if isinstance(inv, RepairTicket)]
    if tab == TicketTab.COMPLETED:
        tickets = [t for t in tickets if t.repair_status == RepairStatus.DELIVERED]
    elif tab == TicketTab.CANCELLED:
        tickets = [t for t in tickets if t.repair_status == RepairStatus.CANCELLED]
    else:
        tickets = [t for t in tickets if t.repair_status not in RepairStatus.terminal()]
    return sorted(tickets, key=lambda t: t.date, reverse=True)


def ticket_actions(ticket: RepairTicket, role: str) -> list[dict]:
    """
    Transition controls this role may use on this ticket.

    Uses the same permission table as the operations themselves, so a
    control is shown exactly when the call behind it would be allowed.
    """
    actions = []
    if can_act(role, SAVE_PERMISSION):
        actions.append({"event": RepairEvent.SAVE, "label": "Save", "target": ticket.repair_status})
    for event in available_events(ticket.repair_status):
        target = next_status(ticket.repair_status, event)
        if can_act(role, required_permission(ticket.repair_status, target)):
            actions.append({"event": event, "label": EVENT_LABELS[event], "target": target})
    return actions
