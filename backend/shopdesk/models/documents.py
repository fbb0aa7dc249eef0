from __future__ import annotations

from dataclasses import dataclass


class VATDirection:
    IN = "IN"    # purchase invoice received from a supplier
    OUT = "OUT"  # sales invoice issued to a buyer

    @classmethod
    def all(cls) -> list[str]:
        return [cls.IN, cls.OUT]


class VATStatus:
    PENDING = "PENDING"
    SYNCED = "SYNCED"


DEFAULT_TAX_RATE = 10


@dataclass(frozen=True)
class VATInvoiceLine:
    product_name: str
    unit: str
    quantity: float
    unit_price: int
    total: int

    def to_dict(self) -> dict:
        return {
            "product_name": self.product_name,
            "unit": self.unit,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "total": self.total,
        }


@dataclass(frozen=True)
class VATInvoice:
    """
    A red (VAT) invoice captured for bookkeeping.

    Stands alone: it never touches parties, stock or debt.
    """
    id: str
    invoice_number: str
    date: str
    partner_name: str
    tax_code: str
    items: tuple[VATInvoiceLine, ...]
    total_before_tax: int
    tax_rate: float
    tax_amount: int
    total_amount: int
    direction: str
    warehouse: str
    status: str = VATStatus.PENDING

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "invoice_number": self.invoice_number,
            "date": self.date,
            "partner_name": self.partner_name,
            "tax_code": self.tax_code,
            "items": [line.to_dict() for line in self.items],
            "total_before_tax": self.total_before_tax,
            "tax_rate": self.tax_rate,
            "tax_amount": self.tax_amount,
            "total_amount": self.total_amount,
            "direction": self.direction,
            "warehouse": self.warehouse,
            "status": self.status,
        }
