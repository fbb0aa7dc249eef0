from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from shopdesk.time_utils import to_utc_z


class Warehouse:
    """The two legal entities whose stock the shop keeps apart."""
    TAY_PHAT = "TAY_PHAT"
    TNC = "TNC"

    @classmethod
    def all(cls) -> list[str]:
        return [cls.TAY_PHAT, cls.TNC]


class ProductType:
    GOODS = "GOODS"
    SERVICE = "SERVICE"

    @classmethod
    def all(cls) -> list[str]:
        return [cls.GOODS, cls.SERVICE]


# Services are never out of stock; this is a display value, not a constraint.
SERVICE_STOCK_SENTINEL = 9999


@dataclass(frozen=True)
class Product:
    """
    Catalogue entry for a physical good or a repair service.

    stock maps warehouse -> on-hand quantity. Treat it as read-only; stock
    changes build a new mapping and a new Product.
    """
    id: str
    name: str
    sku: str
    product_type: str
    price: int
    cost_price: int = 0
    stock: dict[str, int] = field(default_factory=dict)
    unit: str = ""

    @property
    def is_service(self) -> bool:
        return self.product_type == ProductType.SERVICE

    @property
    def total_stock(self) -> int:
        return sum(self.stock.values())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "sku": self.sku,
            "product_type": self.product_type,
            "price": self.price,
            "cost_price": self.cost_price,
            "stock": dict(self.stock),
            "unit": self.unit,
        }


class PurchaseOrderStatus:
    COMPLETED = "COMPLETED"
    PENDING = "PENDING"


@dataclass(frozen=True)
class PurchaseOrderLine:
    product_id: str
    product_name: str
    quantity: int
    import_price: int

    @property
    def line_total(self) -> int:
        return self.quantity * self.import_price

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "import_price": self.import_price,
        }


@dataclass(frozen=True)
class PurchaseOrder:
    """
    Goods received from a supplier into one warehouse.

    Immutable once created; there is no edit or cancel flow.
    """
    id: str
    supplier_id: str
    supplier_name: str
    date: datetime
    warehouse: str
    items: tuple[PurchaseOrderLine, ...]
    total_amount: int
    paid_amount: int
    status: str

    # Purchase orders cannot be cancelled, so their debt always counts.
    is_cancelled = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "supplier_id": self.supplier_id,
            "supplier_name": self.supplier_name,
            "date": to_utc_z(self.date),
            "warehouse": self.warehouse,
            "items": [line.to_dict() for line in self.items],
            "total_amount": self.total_amount,
            "paid_amount": self.paid_amount,
            "status": self.status,
        }
