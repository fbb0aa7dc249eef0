# Overview: Stock movement report and dashboard figures, derived on read.

from __future__ import annotations

from datetime import datetime

from ..models import ProductType, RepairStatus, RepairTicket
from ..store import ShopStore
from ..time_utils import parse_range_bound
from .ledger_service import record_outstanding


LOW_STOCK_THRESHOLD = 5


def stock_report(store: ShopStore) -> list[dict]:
    """
    Import / export / on-hand per goods product over the store's lifetime.

    Imported sums purchase order lines; exported sums invoice lines of
    non-cancelled sales and repair tickets. current_stock is the stored
    on-hand, which sales do not decrement, so it is not
    imported - exported.
    """
    rows = []
    for product in store.products:
        if product.product_type != ProductType.GOODS:
            continue
        imported = sum(
            line.quantity
            for po in store.purchase_orders
            for line in po.items
            if line.product_id == product.id
        )
        exported = sum(
            line.quantity
            for inv in store.invoices
            if not inv.is_cancelled
            for line in inv.items
            if line.product_id == product.id
        )
        rows.append({
            "id": product.id,
            "sku": product.sku,
            "name": product.name,
            "unit": product.unit,
            "total_imported": imported,
            "total_exported": exported,
            "current_stock": product.total_stock,
        })
    return rows


def _in_range(value: datetime, start: datetime | None, end: datetime | None) -> bool:
    if start and value < start:
        return False
    if end and value > end:
        return False
    return True


def dashboard_summary(store: ShopStore, *, start: str | None = None, end: str | None = None) -> dict:
    start_dt = parse_range_bound(start)
    end_dt = parse_range_bound(end, end=True)

    invoices = [
        inv for inv in store.invoices
        if not inv.is_cancelled and _in_range(inv.date, start_dt, end_dt)
    ]
    repairs_by_status = {status: 0 for status in RepairStatus.all()}
    for inv in store.invoices:
        if isinstance(inv, RepairTicket):
            repairs_by_status[inv.repair_status] += 1

    low_stock = [
        {"id": p.id, "sku": p.sku, "name": p.name, "stock": dict(p.stock)}
        for p in store.products
        if p.product_type == ProductType.GOODS
        and any(qty < LOW_STOCK_THRESHOLD for qty in p.stock.values())
    ]

    return {
        "invoice_count": len(invoices),
        "revenue": sum(inv.total_amount for inv in invoices),
        "collected": sum(inv.paid_amount for inv in invoices),
        "outstanding": sum(record_outstanding(inv) for inv in invoices),
        "customer_debt": sum(c.balance for c in store.customers),
        "supplier_debt": sum(s.balance for s in store.suppliers),
        "repairs_by_status": repairs_by_status,
        "active_repairs": sum(
            count for status, count in repairs_by_status.items()
            if status not in RepairStatus.terminal()
        ),
        "low_stock": low_stock,
    }
