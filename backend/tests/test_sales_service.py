"""
POS checkout, debt collection and invoice cancellation tests.
"""

import pytest

from shopdesk.models import PaymentStatus
from shopdesk.services import repair_service, sales_service
from shopdesk.services.ledger_service import expected_customer_balance
from shopdesk.services.lifecycle_service import LifecycleError
from shopdesk.services.permission_service import PermissionDeniedError
from shopdesk.services.record_store import RecordNotFoundError
from shopdesk.validation import ValidationError


@pytest.fixture
def sales(bare_store):
    return bare_store.employees.get("emp3")


@pytest.fixture
def admin(bare_store):
    return bare_store.employees.get("emp1")


@pytest.fixture
def tech(bare_store):
    return bare_store.employees.get("emp2")


CART = [{"product_id": "s3", "quantity": 4}, {"product_id": "s1", "quantity": 2}]  # 200000 + 300000


class TestCheckout:

    def test_paid_sale_keeps_balance_then_unpaid_sale_adds_debt(self, bare_store, sales):
        paid = sales_service.checkout(
            bare_store, sales, customer_id="c1", items=CART, paid_amount=500_000
        )
        assert paid.invoice.total_amount == 500_000
        assert paid.invoice.status == PaymentStatus.PAID
        assert paid.customer.balance == 0

        unpaid = sales_service.checkout(
            bare_store, sales, customer_id="c1",
            items=[{"product_id": "s1", "quantity": 4}, {"product_id": "s2", "quantity": 1}],
            paid_amount=0,
        )
        assert unpaid.invoice.total_amount == 700_000
        assert unpaid.invoice.status == PaymentStatus.UNPAID
        assert unpaid.customer.balance == 700_000

    def test_cash_sale_by_default(self, bare_store, sales):
        result = sales_service.checkout(bare_store, sales, customer_id="c1", items=CART)
        assert result.invoice.paid_amount == 500_000
        assert result.invoice.sales_id == sales.id
        assert result.receipt["document"] == "RECEIPT"
        assert result.receipt["remaining"] == 0

    def test_overpayment_returns_change(self, bare_store, sales):
        result = sales_service.checkout(bare_store, sales, customer_id="c1", items=CART, paid_amount=600_000)
        assert result.invoice.paid_amount == 500_000
        assert result.change_due == 100_000

    def test_duplicate_lines_merge(self, bare_store, sales):
        result = sales_service.checkout(
            bare_store, sales, customer_id="c1",
            items=[{"product_id": "s3", "quantity": 1}, {"product_id": "s3", "quantity": 2}],
        )
        assert len(result.invoice.items) == 1
        assert result.invoice.items[0].quantity == 3

    def test_sales_do_not_touch_stock(self, bare_store, sales):
        before = bare_store.products.get("s3").stock
        sales_service.checkout(bare_store, sales, customer_id="c1", items=CART)
        assert bare_store.products.get("s3").stock == before

    def test_empty_cart(self, bare_store, sales):
        with pytest.raises(ValidationError, match="Cart is empty"):
            sales_service.checkout(bare_store, sales, customer_id="c1", items=[])

    def test_customer_required(self, bare_store, sales):
        with pytest.raises(ValidationError):
            sales_service.checkout(bare_store, sales, customer_id=None, items=CART)

    def test_unknown_customer(self, bare_store, sales):
        with pytest.raises(RecordNotFoundError):
            sales_service.checkout(bare_store, sales, customer_id="ghost", items=CART)
        assert len(bare_store.invoices) == 0

    @pytest.mark.parametrize("quantity", [0, -1, "1.5", True])
    def test_bad_quantity(self, bare_store, sales, quantity):
        with pytest.raises(ValidationError):
            sales_service.checkout(
                bare_store, sales, customer_id="c1", items=[{"product_id": "s3", "quantity": quantity}]
            )

    def test_technician_cannot_sell(self, bare_store, tech):
        with pytest.raises(PermissionDeniedError):
            sales_service.checkout(bare_store, tech, customer_id="c1", items=CART)


class TestCollectPayment:

    def test_partial_then_full(self, bare_store, sales):
        invoice = sales_service.checkout(bare_store, sales, customer_id="c1", items=CART, paid_amount=0).invoice

        first = sales_service.collect_payment(bare_store, sales, invoice.id, 200_000)
        assert first.invoice.status == PaymentStatus.PARTIAL
        assert first.customer.balance == 300_000

        second = sales_service.collect_payment(bare_store, sales, invoice.id, 350_000)
        assert second.invoice.status == PaymentStatus.PAID
        assert second.invoice.paid_amount == 500_000
        assert second.change_due == 50_000
        assert second.customer.balance == 0 == expected_customer_balance(bare_store, "c1")

    def test_settled_invoice(self, bare_store, sales):
        invoice = sales_service.checkout(bare_store, sales, customer_id="c1", items=CART).invoice
        with pytest.raises(ValidationError):
            sales_service.collect_payment(bare_store, sales, invoice.id, 1)

    def test_amount_must_be_positive(self, bare_store, sales):
        invoice = sales_service.checkout(bare_store, sales, customer_id="c1", items=CART, paid_amount=0).invoice
        with pytest.raises(ValidationError):
            sales_service.collect_payment(bare_store, sales, invoice.id, 0)

    def test_delivered_repair_debt(self, bare_store, sales, tech):
        ticket, _ = repair_service.create_ticket(
            bare_store, sales, customer_id="c1", device_info={"device_name": "iPhone 11"}
        )
        repair_service.save_ticket(bare_store, tech, ticket.id, diagnosis="Thay pin")
        repair_service.save_ticket(bare_store, tech, ticket.id, items=[{"product_id": "s1", "quantity": 1}])
        repair_service.approve_quote(bare_store, sales, ticket.id)
        repair_service.mark_finished(bare_store, tech, ticket.id)
        repair_service.confirm_delivery(bare_store, sales, ticket.id, 50_000)

        result = sales_service.collect_payment(bare_store, sales, ticket.id, 100_000)
        assert result.invoice.status == PaymentStatus.PAID
        assert result.customer.balance == 0


class TestCancelInvoice:

    def test_cancel_releases_debt(self, bare_store, sales, admin):
        invoice = sales_service.checkout(bare_store, sales, customer_id="c1", items=CART, paid_amount=100_000).invoice
        assert bare_store.customers.get("c1").balance == 400_000

        cancelled = sales_service.cancel_invoice(bare_store, admin, invoice.id, "Trả hàng")
        assert cancelled.status == PaymentStatus.CANCELLED
        assert bare_store.customers.get("c1").balance == 0

        with pytest.raises(LifecycleError):
            sales_service.collect_payment(bare_store, sales, invoice.id, 1)
        with pytest.raises(LifecycleError):
            sales_service.cancel_invoice(bare_store, admin, invoice.id)

    def test_sales_cannot_cancel(self, bare_store, sales):
        invoice = sales_service.checkout(bare_store, sales, customer_id="c1", items=CART).invoice
        with pytest.raises(PermissionDeniedError):
            sales_service.cancel_invoice(bare_store, sales, invoice.id)

    def test_repair_ticket_goes_through_repair_workflow(self, bare_store, sales, admin):
        ticket, _ = repair_service.create_ticket(
            bare_store, sales, customer_id="c1", device_info={"device_name": "iPhone 11"}
        )
        with pytest.raises(LifecycleError):
            sales_service.cancel_invoice(bare_store, admin, ticket.id)


class TestListing:

    def test_filters(self, bare_store, sales):
        sales_service.checkout(bare_store, sales, customer_id="c1", items=CART)
        sales_service.checkout(bare_store, sales, customer_id="c1", items=CART, paid_amount=0)
        repair_service.create_ticket(bare_store, sales, customer_id="c1", device_info={"device_name": "iPad"})

        assert len(sales_service.list_invoices(bare_store)) == 3
        assert len(sales_service.list_invoices(bare_store, invoice_type="REPAIR")) == 1
        assert len(sales_service.list_invoices(bare_store, status="PAID")) == 1
        assert sales_service.list_invoices(bare_store, customer_id="c2") == []
