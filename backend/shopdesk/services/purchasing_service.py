# Overview: Import-goods confirmation: purchase order, supplier debt and stock-in.

"""
Purchasing Service

import_goods() is one confirmation step with three effects, applied in
this order once validation has passed:
1. Insert the PurchaseOrder (immutable from here on)
2. Post the supplier debt (total - paid) through the ledger
3. Receive the lines into stock[warehouse]

Every line must reference a catalogue product. Unknown product ids are
rejected up front rather than dropped during receipt.
"""

from __future__ import annotations

import logging

from ..models import Employee, PurchaseOrder, PurchaseOrderLine, PurchaseOrderStatus, Warehouse
from ..store import ShopStore
from ..validation import ValidationError, coerce_int, require_choice
from .identifier_service import PREFIX_PURCHASE_ORDER, next_record_id
from .inventory_service import receive_purchase_order
from .invoice_service import add_purchase_order
from .permission_service import require_permission
from shopdesk.time_utils import utcnow


logger = logging.getLogger(__name__)


def purchase_order_status(total: int, paid: int) -> str:
    return PurchaseOrderStatus.COMPLETED if paid >= total else PurchaseOrderStatus.PENDING


def _build_lines(store: ShopStore, raw_items) -> tuple[PurchaseOrderLine, ...]:
    if not isinstance(raw_items, (list, tuple)) or not raw_items:
        raise ValidationError("At least one item is required")

    lines = []
    missing = []
    for index, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            raise ValidationError(f"items[{index}] must be an object")
        product_id = raw.get("product_id")
        product = store.products.find(product_id) if product_id else None
        if product is None:
            missing.append(str(product_id))
            continue
        lines.append(PurchaseOrderLine(
            product_id=product.id,
            product_name=product.name,
            quantity=coerce_int(raw.get("quantity"), f"items[{index}].quantity", minimum=1),
            import_price=coerce_int(raw.get("import_price"), f"items[{index}].import_price"),
        ))

    if missing:
        raise ValidationError(f"Unknown products: {', '.join(missing)}")
    return tuple(lines)


def import_goods(
    store: ShopStore,
    actor: Employee,
    *,
    supplier_id: str | None,
    warehouse: str,
    items,
    paid_amount=0,
) -> PurchaseOrder:
    """
    Confirm goods received from a supplier.

    Raises:
        ValidationError: Missing supplier, no items, unknown products, bad amounts
        RecordNotFoundError: Unknown supplier
        PermissionDeniedError: Actor may not import goods
    """
    require_permission(actor, "IMPORT_GOODS")

    if not supplier_id:
        raise ValidationError("Supplier is required")
    require_choice(warehouse, "warehouse", Warehouse.all())
    supplier = store.suppliers.get(supplier_id)
    lines = _build_lines(store, items)

    total = sum(line.line_total for line in lines)
    paid = min(coerce_int(paid_amount if paid_amount is not None else 0, "paid_amount"), total)

    po = PurchaseOrder(
        id=next_record_id(store, PREFIX_PURCHASE_ORDER),
        supplier_id=supplier.id,
        supplier_name=supplier.name,
        date=utcnow(),
        warehouse=warehouse,
        items=lines,
        total_amount=total,
        paid_amount=paid,
        status=purchase_order_status(total, paid),
    )
    po, _ = add_purchase_order(store, po, actor_id=actor.id)

    result = receive_purchase_order(store.products, po)
    if not result.complete:
        logger.warning(
            "Purchase order %s received with missing products: %s",
            po.id, ", ".join(result.missing_product_ids),
        )
    store.commit(result.products)

    logger.info(
        "Goods imported: %s from %s into %s, %d lines, total=%d",
        po.id, supplier.id, warehouse, len(lines), total,
    )
    return po


def list_purchase_orders(store: ShopStore, *, supplier_id: str | None = None) -> list[PurchaseOrder]:
    orders = store.purchase_orders.all()
    if supplier_id:
        orders = [po for po in orders if po.supplier_id == supplier_id]
    return sorted(orders, key=lambda po: po.date, reverse=True)
