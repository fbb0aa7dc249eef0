# Overview: Built-in mock data a fresh shop starts from.

from __future__ import annotations

from datetime import datetime

from .models import (
    Employee, Product, ProductType, PurchaseOrder, PurchaseOrderStatus, Role,
    SERVICE_STOCK_SENTINEL, Supplier, Warehouse,
)
from .store import ShopState


SEED_DATE = datetime(2024, 1, 1)


EMPLOYEES = (
    Employee(id="emp1", name="Nguyễn Văn Quản Lý", role=Role.ADMIN, username="admin"),
    Employee(id="emp2", name="Trần Kỹ Thuật", role=Role.TECHNICIAN, username="tech"),
    Employee(id="emp3", name="Lê Bán Hàng", role=Role.SALES, username="sales"),
)

SUPPLIERS = (
    Supplier(id="sup1", name="Linh Kiện Lê Nam", phone="0901234567", contact_person="A. Nam"),
    Supplier(id="sup2", name="Kho Sỉ Minh Thông", phone="0987654321", contact_person="C. Thảo", balance=5_000_000),
)

# sup2 starts with 5,000,000 owed; this record carries that debt so the
# supplier balance still equals the sum of its purchase orders.
OPENING_BALANCES = (
    PurchaseOrder(
        id="PO-OPENING-sup2",
        supplier_id="sup2",
        supplier_name="Kho Sỉ Minh Thông",
        date=SEED_DATE,
        warehouse=Warehouse.TAY_PHAT,
        items=(),
        total_amount=5_000_000,
        paid_amount=0,
        status=PurchaseOrderStatus.PENDING,
    ),
)

_SERVICE_STOCK = {Warehouse.TAY_PHAT: SERVICE_STOCK_SENTINEL, Warehouse.TNC: SERVICE_STOCK_SENTINEL}

PRODUCTS = (
    Product(
        id="s1",
        name="Dịch vụ Cài Win + Vệ sinh máy",
        sku="SV-BASIC-01",
        product_type=ProductType.SERVICE,
        price=150_000,
        stock=dict(_SERVICE_STOCK),
        unit="Lần",
    ),
    Product(
        id="s2",
        name="Kiểm tra lỗi phần cứng (Phí dịch vụ)",
        sku="SV-CHECK-01",
        product_type=ProductType.SERVICE,
        price=100_000,
        stock=dict(_SERVICE_STOCK),
        unit="Lần",
    ),
    Product(
        id="s3",
        name="Thay Keo tản nhiệt MX4",
        sku="SV-THERMAL",
        product_type=ProductType.GOODS,
        price=50_000,
        cost_price=20_000,
        stock={Warehouse.TAY_PHAT: 50, Warehouse.TNC: 50},
        unit="Lần",
    ),
)


def build_initial_state() -> ShopState:
    """Mock shop: staff, two suppliers, three catalogue entries, no customers."""
    return ShopState(
        employees=EMPLOYEES,
        products=PRODUCTS,
        suppliers=SUPPLIERS,
        purchase_orders=OPENING_BALANCES,
    )
