# Overview: Debt arithmetic and party balance postings.

"""
Debt Ledger Invariants (authoritative)

- outstanding(record) = 0 if the record is cancelled, else max(0, total - paid).
- party.balance == sum of outstanding(record) over every record that
  references the party (invoices for customers, purchase orders for
  suppliers). Balances are never negative: prepayment/credit is not modeled.
- Balances are maintained incrementally. Every change to a record's total,
  paid amount or cancelled state is followed by EXACTLY ONE call to
  post_debt_change(old, new). Skipping it or calling it twice corrupts the
  balance; reconcile_* is the only from-scratch recomputation.
- Each non-zero posting appends a DebtEvent to the store's debt journal.
"""

from __future__ import annotations

import dataclasses
import logging

from ..models import Customer, DebtEvent, PartyKind, PaymentStatus, PurchaseOrder, Supplier
from ..store import ShopStore
from .identifier_service import PREFIX_DEBT_EVENT, next_record_id
from shopdesk.time_utils import utcnow


logger = logging.getLogger(__name__)


def outstanding(total: int, paid: int, is_cancelled: bool = False) -> int:
    """Amount still owed on one record."""
    if is_cancelled:
        return 0
    return max(0, total - paid)


def record_outstanding(record) -> int:
    """outstanding() for an invoice, repair ticket or purchase order; None counts as 0."""
    if record is None:
        return 0
    return outstanding(record.total_amount, record.paid_amount, record.is_cancelled)


def derive_payment_status(total: int, paid: int) -> str:
    """
    Payment status as a function of (total, paid).

    CANCELLED is never derived; it is set explicitly and overrides this.
    """
    if paid >= total:
        return PaymentStatus.PAID
    if paid > 0:
        return PaymentStatus.PARTIAL
    return PaymentStatus.UNPAID


def apply_debt_delta(party, delta: int):
    """Return party with balance moved by delta, floored at zero."""
    return dataclasses.replace(party, balance=max(0, party.balance + delta))


def debt_delta(old_record, new_record) -> int:
    return record_outstanding(new_record) - record_outstanding(old_record)


def record_debt_change(old_record, new_record, party):
    """
    Apply the change in outstanding amount between two versions of a record.

    Args:
        old_record: The record before the mutation (None for an insert)
        new_record: The record after the mutation
        party: The customer or supplier the record references

    Returns:
        The party with its updated balance
    """
    delta = debt_delta(old_record, new_record)
    if delta == 0:
        return party
    return apply_debt_delta(party, delta)


def _party_ref(record) -> tuple[str, str]:
    if isinstance(record, PurchaseOrder):
        return PartyKind.SUPPLIER, record.supplier_id
    return PartyKind.CUSTOMER, record.customer_id


def _party_collection_name(party_kind: str) -> str:
    return "suppliers" if party_kind == PartyKind.SUPPLIER else "customers"


def post_debt_change(store: ShopStore, old_record, new_record, *, actor_id: str | None = None):
    """
    Post the debt effect of one record mutation to the referenced party.

    Resolves the party by id (customer for invoices and repair tickets,
    supplier for purchase orders), commits the new balance and journals the
    delta. A zero delta leaves the party and the journal untouched.

    Returns:
        The party after the posting

    Raises:
        RecordNotFoundError: If the referenced party does not exist
    """
    party_kind, party_id = _party_ref(new_record)
    parties = store.collection(_party_collection_name(party_kind))
    party = parties.get(party_id)

    delta = debt_delta(old_record, new_record)
    if delta == 0:
        return party

    updated = record_debt_change(old_record, new_record, party)
    store.commit(parties.replace_by_id(party_id, updated))

    event = DebtEvent(
        id=next_record_id(store, PREFIX_DEBT_EVENT, pad=6),
        party_kind=party_kind,
        party_id=party_id,
        record_id=new_record.id,
        delta=delta,
        balance_after=updated.balance,
        occurred_at=utcnow(),
        actor_id=actor_id,
    )
    store.commit(store.debt_events.insert(event))

    logger.info(
        "Debt posted: %s %s record=%s delta=%+d balance=%d",
        party_kind, party_id, new_record.id, delta, updated.balance,
    )
    return updated


def expected_customer_balance(store: ShopStore, customer_id: str) -> int:
    return sum(
        record_outstanding(inv)
        for inv in store.invoices
        if inv.customer_id == customer_id
    )


def expected_supplier_balance(store: ShopStore, supplier_id: str) -> int:
    return sum(
        record_outstanding(po)
        for po in store.purchase_orders
        if po.supplier_id == supplier_id
    )


def reconcile_customer(store: ShopStore, customer_id: str) -> Customer:
    """
    Recompute a customer's balance from scratch and commit it.

    Raises:
        RecordNotFoundError: If the customer does not exist
    """
    customer = store.customers.get(customer_id)
    expected = expected_customer_balance(store, customer_id)
    if customer.balance == expected:
        return customer
    logger.warning(
        "Reconciled customer %s balance %d -> %d", customer_id, customer.balance, expected
    )
    collection, updated = store.customers.patch_by_id(customer_id, balance=expected)
    store.commit(collection)
    return updated


def reconcile_supplier(store: ShopStore, supplier_id: str) -> Supplier:
    """
    Recompute a supplier's balance from scratch and commit it.

    Raises:
        RecordNotFoundError: If the supplier does not exist
    """
    supplier = store.suppliers.get(supplier_id)
    expected = expected_supplier_balance(store, supplier_id)
    if supplier.balance == expected:
        return supplier
    logger.warning(
        "Reconciled supplier %s balance %d -> %d", supplier_id, supplier.balance, expected
    )
    collection, updated = store.suppliers.patch_by_id(supplier_id, balance=expected)
    store.commit(collection)
    return updated


def list_debt_events(store: ShopStore, *, party_id: str | None = None, limit: int = 200) -> list[DebtEvent]:
    """Journal entries, newest first, optionally for one party."""
    events = store.debt_events.all()
    if party_id is not None:
        events = [ev for ev in events if ev.party_id == party_id]
    return events[:limit]
