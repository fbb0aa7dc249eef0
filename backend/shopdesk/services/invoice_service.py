# Overview: The only write path for invoices, repair tickets and purchase orders.

"""
Invoice Chokepoint

Sales invoices, repair tickets and purchase orders change a party's debt
whenever their total, paid amount or cancelled state changes. To keep
party.balance equal to the sum of outstanding amounts, every insert and
every patch of those records goes through this module, and each one posts
exactly one debt change.

Services must never commit store.invoices or store.purchase_orders
directly.
"""

from __future__ import annotations

import logging

from ..models import Invoice, InvoiceLine, PurchaseOrder
from ..store import ShopStore
from ..validation import ValidationError, coerce_int
from .ledger_service import post_debt_change


logger = logging.getLogger(__name__)


def build_invoice_lines(store: ShopStore, raw_items) -> tuple[InvoiceLine, ...]:
    """
    Turn [{product_id, quantity, price?}, ...] into invoice lines.

    Name and product type are copied from the catalogue; price defaults
    to the catalogue price. Repeated product ids merge into one line with
    the quantities added, keeping the first line's price.

    Raises:
        ValidationError: On a malformed entry or an unknown product
    """
    if raw_items is None:
        return ()
    if not isinstance(raw_items, (list, tuple)):
        raise ValidationError("items must be a list")

    merged: dict[str, InvoiceLine] = {}
    for index, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            raise ValidationError(f"items[{index}] must be an object")
        product_id = raw.get("product_id")
        product = store.products.find(product_id) if product_id else None
        if product is None:
            raise ValidationError(f"items[{index}]: unknown product '{product_id}'")

        quantity = coerce_int(raw.get("quantity", 1), f"items[{index}].quantity", minimum=1)
        price = raw.get("price")
        price = product.price if price is None else coerce_int(price, f"items[{index}].price")

        existing = merged.get(product.id)
        if existing is not None:
            merged[product.id] = InvoiceLine(
                product_id=existing.product_id,
                product_name=existing.product_name,
                quantity=existing.quantity + quantity,
                price=existing.price,
                product_type=existing.product_type,
            )
        else:
            merged[product.id] = InvoiceLine(
                product_id=product.id,
                product_name=product.name,
                quantity=quantity,
                price=price,
                product_type=product.product_type,
            )
    return tuple(merged.values())


def add_invoice(store: ShopStore, invoice: Invoice, *, actor_id: str | None = None):
    """
    Insert a sale invoice or repair ticket and post its debt.

    Returns:
        (invoice, customer after posting)

    Raises:
        RecordNotFoundError: If the referenced customer does not exist
    """
    # Resolve first so a missing customer leaves the store untouched
    store.customers.get(invoice.customer_id)

    store.commit(store.invoices.insert(invoice))
    customer = post_debt_change(store, None, invoice, actor_id=actor_id)
    logger.info(
        "%s %s added for customer %s total=%d paid=%d",
        invoice.invoice_type, invoice.id, invoice.customer_id,
        invoice.total_amount, invoice.paid_amount,
    )
    return invoice, customer


def update_invoice(store: ShopStore, invoice_id: str, *, actor_id: str | None = None, **changes):
    """
    Patch an invoice or repair ticket and post the debt difference.

    Returns:
        (updated invoice, customer after posting)

    Raises:
        RecordNotFoundError: If the invoice or its customer does not exist
    """
    old = store.invoices.get(invoice_id)
    store.customers.get(changes.get("customer_id", old.customer_id))

    invoices, updated = store.invoices.patch_by_id(invoice_id, **changes)
    store.commit(invoices)
    customer = post_debt_change(store, old, updated, actor_id=actor_id)
    return updated, customer


def add_purchase_order(store: ShopStore, po: PurchaseOrder, *, actor_id: str | None = None):
    """
    Insert a purchase order and post the supplier debt.

    Returns:
        (purchase order, supplier after posting)

    Raises:
        RecordNotFoundError: If the referenced supplier does not exist
    """
    store.suppliers.get(po.supplier_id)

    store.commit(store.purchase_orders.insert(po))
    supplier = post_debt_change(store, None, po, actor_id=actor_id)
    logger.info(
        "Purchase order %s added for supplier %s total=%d paid=%d",
        po.id, po.supplier_id, po.total_amount, po.paid_amount,
    )
    return po, supplier
