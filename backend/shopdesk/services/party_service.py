# Overview: Customers and suppliers: creation, lookup and debt overview.

"""
Party Service

Parties are created with a zero balance and never deleted. A balance only
moves through ledger_service postings; create/update here never touch it.
"""

from __future__ import annotations

import logging

from ..models import Customer, Employee, Supplier
from ..store import ShopStore
from ..validation import optional_text, require_text
from .identifier_service import PREFIX_CUSTOMER, PREFIX_SUPPLIER, next_record_id
from .ledger_service import record_outstanding
from .permission_service import require_permission, user_has_permission


logger = logging.getLogger(__name__)


def create_customer(
    store: ShopStore,
    actor: Employee,
    *,
    name: str | None,
    phone: str | None,
    address: str | None = None,
) -> Customer:
    """
    Add a customer at the top of the list.

    Staff who receive devices may add the customer on the spot, so
    CREATE_REPAIR_TICKET is enough without MANAGE_CUSTOMERS.

    Raises:
        ValidationError: Missing name or phone
    """
    if not user_has_permission(actor, "CREATE_REPAIR_TICKET"):
        require_permission(actor, "MANAGE_CUSTOMERS")
    name = require_text(name, "name", label="Customer name")
    phone = require_text(phone, "phone", label="Phone")
    customer = Customer(
        id=next_record_id(store, PREFIX_CUSTOMER),
        name=name,
        phone=phone,
        address=optional_text(address) or "",
    )
    store.commit(store.customers.insert(customer))
    logger.info("Customer %s created by %s", customer.id, actor.id)
    return customer


def update_customer(store: ShopStore, actor: Employee, customer_id: str, **fields) -> Customer:
    """Edit contact details. balance is not editable here."""
    require_permission(actor, "MANAGE_CUSTOMERS")
    store.customers.get(customer_id)

    changes = {}
    if fields.get("name") is not None:
        changes["name"] = require_text(fields["name"], "name", label="Customer name")
    if fields.get("phone") is not None:
        changes["phone"] = require_text(fields["phone"], "phone", label="Phone")
    if fields.get("address") is not None:
        changes["address"] = optional_text(fields["address"]) or ""

    collection, updated = store.customers.patch_by_id(customer_id, **changes)
    store.commit(collection)
    return updated


def create_supplier(
    store: ShopStore,
    actor: Employee,
    *,
    name: str | None,
    phone: str | None,
    address: str | None = None,
    contact_person: str | None = None,
) -> Supplier:
    require_permission(actor, "MANAGE_SUPPLIERS")
    supplier = Supplier(
        id=next_record_id(store, PREFIX_SUPPLIER),
        name=require_text(name, "name", label="Supplier name"),
        phone=require_text(phone, "phone", label="Phone"),
        address=optional_text(address) or "",
        contact_person=optional_text(contact_person) or "",
    )
    store.commit(store.suppliers.insert(supplier))
    logger.info("Supplier %s created by %s", supplier.id, actor.id)
    return supplier


def search_customers(store: ShopStore, query: str | None = None) -> list[Customer]:
    """Name or phone substring match."""
    if not query:
        return store.customers.all()
    needle = query.strip().lower()
    return store.customers.filter(lambda c: needle in c.name.lower() or needle in c.phone)


def customer_debt_overview(store: ShopStore) -> list[dict]:
    """
    Customers who owe money, largest balance first, with the invoices
    that make up the balance.
    """
    rows = []
    for customer in store.customers:
        if customer.balance <= 0:
            continue
        open_invoices = [
            {
                "id": inv.id,
                "invoice_type": inv.invoice_type,
                "date": inv.to_dict()["date"],
                "total_amount": inv.total_amount,
                "paid_amount": inv.paid_amount,
                "outstanding": record_outstanding(inv),
            }
            for inv in store.invoices
            if inv.customer_id == customer.id and record_outstanding(inv) > 0
        ]
        rows.append({**customer.to_dict(), "open_invoices": open_invoices})
    return sorted(rows, key=lambda row: row["balance"], reverse=True)


def supplier_debt_overview(store: ShopStore) -> list[dict]:
    """Suppliers the shop owes, largest balance first."""
    rows = [
        {
            **supplier.to_dict(),
            "open_orders": [
                {"id": po.id, "total_amount": po.total_amount, "paid_amount": po.paid_amount,
                 "outstanding": record_outstanding(po)}
                for po in store.purchase_orders
                if po.supplier_id == supplier.id and record_outstanding(po) > 0
            ],
        }
        for supplier in store.suppliers
        if supplier.balance > 0
    ]
    return sorted(rows, key=lambda row: row["balance"], reverse=True)
