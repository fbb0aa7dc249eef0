# Overview: Record id allocation for new invoices, tickets, orders and parties.

from __future__ import annotations

from ..store import ShopStore


# Prefix per record kind
PREFIX_SALE = "INV"
PREFIX_REPAIR = "REP"
PREFIX_PURCHASE_ORDER = "PO"
PREFIX_VAT = "VAT"
PREFIX_CUSTOMER = "C"
PREFIX_SUPPLIER = "SUP"
PREFIX_EMPLOYEE = "EMP"
PREFIX_PRODUCT = "P"
PREFIX_DEBT_EVENT = "DEBT"


def next_record_id(store: ShopStore, prefix: str, *, pad: int = 4) -> str:
    """
    Allocate the next id for a prefix, e.g. REP-0001, REP-0002.

    Sequences live on the store, so they restart with each application
    instance together with the data they number. Numbers already taken by
    a stored record (seed data, fixtures) are skipped.
    """
    if not prefix:
        raise ValueError("prefix is required")
    number = store.sequences.get(prefix, 0)
    while True:
        number += 1
        candidate = f"{prefix}-{number:0{pad}d}"
        if not store.id_in_use(candidate):
            break
    store.sequences[prefix] = number
    return candidate
