"""
Stock report, dashboard and party overview tests.
"""

import pytest

from shopdesk.services import party_service, purchasing_service, repair_service, reporting_service, sales_service
from shopdesk.services.permission_service import PermissionDeniedError
from shopdesk.validation import ValidationError


@pytest.fixture
def sales(bare_store):
    return bare_store.employees.get("emp3")


@pytest.fixture
def admin(bare_store):
    return bare_store.employees.get("emp1")


class TestStockReport:

    def test_goods_only(self, bare_store):
        rows = reporting_service.stock_report(bare_store)
        assert [r["id"] for r in rows] == ["s3"]
        assert rows[0]["current_stock"] == 100

    def test_imports_and_exports(self, bare_store, sales, admin):
        purchasing_service.import_goods(
            bare_store, sales, supplier_id="sup1", warehouse="TNC",
            items=[{"product_id": "s3", "quantity": 5, "import_price": 20_000}],
        )
        sales_service.checkout(bare_store, sales, customer_id="c1", items=[{"product_id": "s3", "quantity": 3}])
        cancelled = sales_service.checkout(
            bare_store, sales, customer_id="c1", items=[{"product_id": "s3", "quantity": 7}]
        ).invoice
        sales_service.cancel_invoice(bare_store, admin, cancelled.id)

        row = reporting_service.stock_report(bare_store)[0]
        assert row["total_imported"] == 5
        assert row["total_exported"] == 3
        # Stored on-hand only moves on receipt
        assert row["current_stock"] == 105


class TestDashboard:

    def test_summary(self, bare_store, sales):
        sales_service.checkout(
            bare_store, sales, customer_id="c1", items=[{"product_id": "s1", "quantity": 2}], paid_amount=100_000
        )
        repair_service.create_ticket(bare_store, sales, customer_id="c1", device_info={"device_name": "Macbook"})

        summary = reporting_service.dashboard_summary(bare_store)
        assert summary["invoice_count"] == 2
        assert summary["revenue"] == 300_000
        assert summary["collected"] == 100_000
        assert summary["outstanding"] == 200_000
        assert summary["customer_debt"] == 200_000
        assert summary["repairs_by_status"]["RECEIVED"] == 1
        assert summary["active_repairs"] == 1
        assert summary["low_stock"] == []

    def test_date_window(self, bare_store, sales):
        sales_service.checkout(bare_store, sales, customer_id="c1", items=[{"product_id": "s1", "quantity": 1}])
        summary = reporting_service.dashboard_summary(bare_store, end="2020-01-01T00:00:00Z")
        assert summary["invoice_count"] == 0

    def test_bare_end_date_covers_the_whole_day(self, bare_store, sales):
        result = sales_service.checkout(bare_store, sales, customer_id="c1", items=[{"product_id": "s1", "quantity": 1}])
        day = result.invoice.date.date().isoformat()
        summary = reporting_service.dashboard_summary(bare_store, start=day, end=day)
        assert summary["invoice_count"] == 1


class TestParties:

    def test_create_and_search_customer(self, bare_store, sales):
        customer = party_service.create_customer(bare_store, sales, name="Trương Minh", phone="0977123456")
        assert customer.balance == 0
        assert bare_store.customers.all()[0] == customer
        assert party_service.search_customers(bare_store, "0977") == [customer]
        assert party_service.search_customers(bare_store, "trương") == [customer]

    def test_customer_requires_phone(self, bare_store, sales):
        with pytest.raises(ValidationError):
            party_service.create_customer(bare_store, sales, name="X", phone="")
        assert bare_store.sequences == {}

    def test_update_keeps_balance(self, bare_store, sales):
        sales_service.checkout(
            bare_store, sales, customer_id="c1", items=[{"product_id": "s1", "quantity": 1}], paid_amount=0
        )
        updated = party_service.update_customer(bare_store, sales, "c1", address="12 Lê Lợi")
        assert updated.address == "12 Lê Lợi"
        assert updated.balance == 150_000

    def test_technician_cannot_edit_customer(self, bare_store):
        with pytest.raises(PermissionDeniedError):
            party_service.update_customer(bare_store, bare_store.employees.get("emp2"), "c1", name="X")

    def test_supplier_overview(self, bare_store, sales):
        supplier = party_service.create_supplier(bare_store, sales, name="Phong Vũ", phone="028", contact_person="Anh Vũ")
        assert supplier.contact_person == "Anh Vũ"
        rows = party_service.supplier_debt_overview(bare_store)
        assert [r["id"] for r in rows] == ["sup2"]
        assert rows[0]["open_orders"][0]["id"] == "PO-OPENING-sup2"

    def test_customer_overview(self, bare_store, sales):
        assert party_service.customer_debt_overview(bare_store) == []
        sales_service.checkout(
            bare_store, sales, customer_id="c1", items=[{"product_id": "s2", "quantity": 1}], paid_amount=0
        )
        rows = party_service.customer_debt_overview(bare_store)
        assert rows[0]["balance"] == 100_000
        assert len(rows[0]["open_invoices"]) == 1
