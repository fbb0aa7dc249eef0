from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar

from shopdesk.time_utils import to_utc_z


class PaymentStatus:
    PAID = "PAID"
    PARTIAL = "PARTIAL"
    UNPAID = "UNPAID"
    CANCELLED = "CANCELLED"

    @classmethod
    def all(cls) -> list[str]:
        return [cls.PAID, cls.PARTIAL, cls.UNPAID, cls.CANCELLED]


class InvoiceType:
    SALE = "SALE"
    REPAIR = "REPAIR"


class RepairStatus:
    """Repair workflow states (see services/lifecycle_service.py for transitions)."""
    RECEIVED = "RECEIVED"
    CHECKING = "CHECKING"
    QUOTING = "QUOTING"
    WAITING_PARTS = "WAITING_PARTS"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @classmethod
    def all(cls) -> list[str]:
        return [
            cls.RECEIVED, cls.CHECKING, cls.QUOTING, cls.WAITING_PARTS,
            cls.IN_PROGRESS, cls.COMPLETED, cls.DELIVERED, cls.CANCELLED,
        ]

    @classmethod
    def terminal(cls) -> list[str]:
        return [cls.DELIVERED, cls.CANCELLED]


@dataclass(frozen=True)
class InvoiceLine:
    product_id: str
    product_name: str
    quantity: int
    price: int
    product_type: str

    @property
    def line_total(self) -> int:
        return self.quantity * self.price

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "price": self.price,
            "product_type": self.product_type,
            "line_total": self.line_total,
        }


def lines_total(items) -> int:
    """Invoice total: sum of quantity x price over the lines."""
    return sum(line.line_total for line in items)


@dataclass(frozen=True)
class DeviceInfo:
    """Intake details of a device left for repair."""
    device_name: str
    symptoms: str = ""
    model: str = ""
    serial: str = ""
    password: str = ""
    diagnosis: str = ""
    accessories: str = ""
    appearance: str = ""

    def to_dict(self) -> dict:
        return {
            "device_name": self.device_name,
            "symptoms": self.symptoms,
            "model": self.model,
            "serial": self.serial,
            "password": self.password,
            "diagnosis": self.diagnosis,
            "accessories": self.accessories,
            "appearance": self.appearance,
        }


@dataclass(frozen=True, kw_only=True)
class Invoice:
    """
    Fields shared by every customer-facing invoice.

    Concrete records are SaleInvoice or RepairTicket; invoice_type is the
    discriminant and is fixed per class.
    """
    invoice_type: ClassVar[str]

    id: str
    customer_id: str
    customer_name: str
    date: datetime
    warehouse: str
    items: tuple[InvoiceLine, ...] = ()
    total_amount: int = 0
    paid_amount: int = 0
    status: str = PaymentStatus.UNPAID
    note: str = ""

    @property
    def is_cancelled(self) -> bool:
        return self.status == PaymentStatus.CANCELLED

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "invoice_type": self.invoice_type,
            "customer_id": self.customer_id,
            "customer_name": self.customer_name,
            "date": to_utc_z(self.date),
            "warehouse": self.warehouse,
            "items": [line.to_dict() for line in self.items],
            "total_amount": self.total_amount,
            "paid_amount": self.paid_amount,
            "status": self.status,
            "note": self.note,
        }


@dataclass(frozen=True, kw_only=True)
class SaleInvoice(Invoice):
    """Counter sale created at POS checkout."""
    invoice_type: ClassVar[str] = InvoiceType.SALE

    sales_id: str | None = None

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["sales_id"] = self.sales_id
        return data


@dataclass(frozen=True, kw_only=True)
class RepairTicket(Invoice):
    """
    A repair job. Billed like an invoice once parts and labour are quoted.

    device_info and repair_status are always present on this variant.
    """
    invoice_type: ClassVar[str] = InvoiceType.REPAIR

    device_info: DeviceInfo
    repair_status: str = RepairStatus.RECEIVED
    technician_id: str | None = None
    sales_id: str | None = None

    @property
    def is_cancelled(self) -> bool:
        return self.status == PaymentStatus.CANCELLED or self.repair_status == RepairStatus.CANCELLED

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            "repair_status": self.repair_status,
            "device_info": self.device_info.to_dict(),
            "technician_id": self.technician_id,
            "sales_id": self.sales_id,
        })
        return data
