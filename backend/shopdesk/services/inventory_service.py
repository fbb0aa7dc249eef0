# Overview: Product catalogue and per-warehouse stock adjustments.

"""
Inventory Service

STOCK RULES:
- Product.stock maps warehouse -> on-hand quantity.
- Goods stock is non-negative. Service stock is a nominal sentinel
  (SERVICE_STOCK_SENTINEL) and is never enforced.
- Receiving a purchase order increments stock[po.warehouse] by each goods line's
  quantity. Receiving is NOT idempotent: the same PO received twice adds
  its quantities twice.
- Sales do not decrement stock. On-hand for sold goods is derived by the
  stock report, not stored.
- Cost prices are not re-averaged on receipt.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..models import Product, ProductType, PurchaseOrder, SERVICE_STOCK_SENTINEL, Warehouse
from ..store import ShopStore
from ..validation import ValidationError, coerce_int, require_choice, require_text
from .identifier_service import PREFIX_PRODUCT, next_record_id
from .record_store import RecordCollection


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReceiveResult:
    """
    Outcome of applying a purchase order to the catalogue.

    missing_product_ids lists PO lines whose product id is not in the
    catalogue; their quantities were not applied anywhere.
    """
    products: RecordCollection
    missing_product_ids: tuple[str, ...] = field(default_factory=tuple)

    @property
    def complete(self) -> bool:
        return not self.missing_product_ids


def receive_purchase_order(products: RecordCollection, po: PurchaseOrder) -> ReceiveResult:
    """
    Increment per-warehouse stock for every line of a purchase order.

    Lines for the same product accumulate. SERVICE lines keep their
    sentinel stock. Products the PO does not reference are carried over
    unchanged (same objects).
    """
    received: dict[str, int] = {}
    for line in po.items:
        received[line.product_id] = received.get(line.product_id, 0) + line.quantity

    missing = tuple(pid for pid in received if products.find(pid) is None)

    updated = products
    for product_id, quantity in received.items():
        if product_id in missing:
            continue
        product = updated.get(product_id)
        if product.product_type == ProductType.SERVICE:
            continue
        stock = dict(product.stock)
        stock[po.warehouse] = stock.get(po.warehouse, 0) + quantity
        updated, _ = updated.patch_by_id(product_id, stock=stock)

    return ReceiveResult(products=updated, missing_product_ids=missing)


def build_product(
    store: ShopStore,
    *,
    name: str,
    sku: str,
    product_type: str,
    price,
    cost_price=0,
    unit: str = "",
    stock: dict | None = None,
    product_id: str | None = None,
) -> Product:
    """
    Validate catalogue input and build a Product.

    Services get the sentinel stock in every warehouse; goods start at the
    given quantities (default 0).

    product_id names an existing product to replace. Unknown ids raise
    RecordNotFoundError rather than creating a product under that id.
    """
    name = require_text(name, "name", label="Product name")
    sku = require_text(sku, "sku", label="SKU")
    require_choice(product_type, "product_type", ProductType.all())
    price = coerce_int(price, "price")
    cost_price = coerce_int(cost_price if cost_price is not None else 0, "cost_price")

    if product_type == ProductType.SERVICE:
        levels = {wh: SERVICE_STOCK_SENTINEL for wh in Warehouse.all()}
    else:
        levels = {wh: 0 for wh in Warehouse.all()}
        for warehouse, quantity in (stock or {}).items():
            require_choice(warehouse, "warehouse", Warehouse.all())
            levels[warehouse] = coerce_int(quantity, f"stock[{warehouse}]")

    if product_id:
        # Edits only; new products always get an allocated id
        store.products.get(product_id)

    return Product(
        id=product_id or next_record_id(store, PREFIX_PRODUCT),
        name=name,
        sku=sku.upper(),
        product_type=product_type,
        price=price,
        cost_price=cost_price,
        stock=levels,
        unit=(unit or "").strip(),
    )


def upsert_product(store: ShopStore, product: Product) -> Product:
    """Replace the product if its id exists, otherwise add it to the top."""
    duplicate = next(
        (p for p in store.products if p.sku == product.sku and p.id != product.id),
        None,
    )
    if duplicate is not None:
        raise ValidationError(f"SKU '{product.sku}' already used by product {duplicate.id}")

    if store.products.find(product.id) is not None:
        store.commit(store.products.replace_by_id(product.id, product))
        logger.info("Product %s updated", product.id)
    else:
        store.commit(store.products.insert(product))
        logger.info("Product %s added", product.id)
    return product


def search_products(store: ShopStore, query: str | None = None) -> list[Product]:
    """Case-insensitive name or SKU search; empty query returns everything."""
    if not query:
        return store.products.all()
    needle = query.strip().lower()
    return store.products.filter(
        lambda p: needle in p.name.lower() or needle in p.sku.lower()
    )
