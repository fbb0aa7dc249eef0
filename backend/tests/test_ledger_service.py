"""
Debt ledger tests.

Verifies:
- outstanding() is max(0, total - paid), or 0 once cancelled
- Balances never go negative
- Balance equals the sum of outstanding amounts after any sequence of
  mutations that go through the invoice write path
- Each non-zero posting is journalled once; zero deltas are not
- reconcile_* repairs a drifted balance
"""

from datetime import datetime

import pytest

from shopdesk.models import Customer, PaymentStatus, PurchaseOrder, SaleInvoice, Supplier
from shopdesk.services import ledger_service
from shopdesk.services.invoice_service import add_invoice, add_purchase_order, update_invoice
from shopdesk.services.ledger_service import (
    apply_debt_delta, derive_payment_status, expected_customer_balance,
    outstanding, record_debt_change,
)
from shopdesk.services.record_store import RecordNotFoundError


def _invoice(invoice_id, total, paid, status=None, customer_id="c1"):
    return SaleInvoice(
        id=invoice_id,
        customer_id=customer_id,
        customer_name="Phạm Khách Hàng",
        date=datetime(2024, 5, 1, 9, 0),
        warehouse="TAY_PHAT",
        total_amount=total,
        paid_amount=paid,
        status=status or derive_payment_status(total, paid),
    )


# =============================================================================
# PURE ARITHMETIC
# =============================================================================


class TestOutstanding:

    @pytest.mark.parametrize("total,paid,expected", [
        (500_000, 0, 500_000),
        (500_000, 200_000, 300_000),
        (500_000, 500_000, 0),
        (500_000, 800_000, 0),
        (0, 0, 0),
    ])
    def test_open_record(self, total, paid, expected):
        assert outstanding(total, paid) == expected

    @pytest.mark.parametrize("total,paid", [(500_000, 0), (500_000, 100_000), (0, 0)])
    def test_cancelled_record_owes_nothing(self, total, paid):
        assert outstanding(total, paid, is_cancelled=True) == 0

    def test_none_record_counts_as_zero(self):
        assert ledger_service.record_outstanding(None) == 0


class TestPaymentStatus:

    @pytest.mark.parametrize("total,paid,status", [
        (300_000, 300_000, PaymentStatus.PAID),
        (300_000, 400_000, PaymentStatus.PAID),
        (300_000, 100_000, PaymentStatus.PARTIAL),
        (300_000, 0, PaymentStatus.UNPAID),
        (0, 0, PaymentStatus.PAID),
    ])
    def test_derived_from_total_and_paid(self, total, paid, status):
        assert derive_payment_status(total, paid) == status


class TestDebtDelta:

    def test_floor_at_zero(self):
        customer = Customer(id="c1", name="X", phone="1", balance=100_000)
        assert apply_debt_delta(customer, -250_000).balance == 0

    def test_insert_adds_outstanding(self):
        customer = Customer(id="c1", name="X", phone="1")
        updated = record_debt_change(None, _invoice("INV-1", 700_000, 0), customer)
        assert updated.balance == 700_000

    def test_payment_reduces_balance(self):
        customer = Customer(id="c1", name="X", phone="1", balance=700_000)
        old = _invoice("INV-1", 700_000, 0)
        new = _invoice("INV-1", 700_000, 300_000)
        assert record_debt_change(old, new, customer).balance == 400_000

    def test_cancellation_releases_outstanding(self):
        customer = Customer(id="c1", name="X", phone="1", balance=700_000)
        old = _invoice("INV-1", 700_000, 0)
        new = _invoice("INV-1", 700_000, 0, status=PaymentStatus.CANCELLED)
        assert record_debt_change(old, new, customer).balance == 0

    def test_zero_delta_returns_same_party(self):
        customer = Customer(id="c1", name="X", phone="1", balance=5)
        invoice = _invoice("INV-1", 100, 100)
        assert record_debt_change(invoice, invoice, customer) is customer


# =============================================================================
# POSTINGS THROUGH THE STORE
# =============================================================================


class TestPostings:

    def test_paid_then_unpaid_invoice(self, bare_store):
        """Customer starts at 0; a fully paid sale keeps 0, an unpaid one adds 700000."""
        _, customer = add_invoice(bare_store, _invoice("INV-1", 500_000, 500_000))
        assert customer.balance == 0

        _, customer = add_invoice(bare_store, _invoice("INV-2", 700_000, 0))
        assert customer.balance == 700_000
        assert bare_store.customers.get("c1").balance == 700_000

    def test_balance_matches_sum_after_mixed_mutations(self, bare_store):
        add_invoice(bare_store, _invoice("INV-1", 500_000, 0))
        add_invoice(bare_store, _invoice("INV-2", 300_000, 100_000))
        add_invoice(bare_store, _invoice("INV-3", 200_000, 200_000))
        update_invoice(bare_store, "INV-1", paid_amount=450_000, status=PaymentStatus.PARTIAL)
        update_invoice(bare_store, "INV-2", status=PaymentStatus.CANCELLED)
        update_invoice(bare_store, "INV-3", total_amount=260_000)
        update_invoice(bare_store, "INV-1", paid_amount=500_000, status=PaymentStatus.PAID)

        balance = bare_store.customers.get("c1").balance
        assert balance == expected_customer_balance(bare_store, "c1") == 60_000
        assert balance >= 0

    def test_each_posting_journalled_once(self, bare_store):
        add_invoice(bare_store, _invoice("INV-1", 500_000, 0), actor_id="emp3")
        update_invoice(bare_store, "INV-1", actor_id="emp3", paid_amount=200_000)
        # Zero-delta update: nothing journalled
        update_invoice(bare_store, "INV-1", note="called customer")

        events = ledger_service.list_debt_events(bare_store, party_id="c1")
        assert [(e.delta, e.balance_after) for e in events] == [(-200_000, 300_000), (500_000, 500_000)]
        assert all(e.record_id == "INV-1" and e.actor_id == "emp3" for e in events)

    def test_unknown_customer_leaves_store_untouched(self, bare_store):
        with pytest.raises(RecordNotFoundError):
            add_invoice(bare_store, _invoice("INV-1", 500_000, 0, customer_id="ghost"))
        assert len(bare_store.invoices) == 0
        assert len(bare_store.debt_events) == 0

    def test_purchase_order_posts_to_supplier(self, bare_store):
        po = PurchaseOrder(
            id="PO-X", supplier_id="sup1", supplier_name="Linh Kiện Lê Nam",
            date=datetime(2024, 5, 1), warehouse="TNC", items=(),
            total_amount=1_000_000, paid_amount=400_000, status="PENDING",
        )
        _, supplier = add_purchase_order(bare_store, po)
        assert supplier.balance == 600_000
        assert ledger_service.expected_supplier_balance(bare_store, "sup1") == 600_000


class TestReconcile:

    def test_customer_drift_is_corrected(self, bare_store):
        add_invoice(bare_store, _invoice("INV-1", 500_000, 100_000))
        collection, _ = bare_store.customers.patch_by_id("c1", balance=999)
        bare_store.commit(collection)

        assert ledger_service.reconcile_customer(bare_store, "c1").balance == 400_000

    def test_seed_supplier_is_consistent(self, bare_store):
        """The opening balance of sup2 is backed by a purchase order."""
        supplier = bare_store.suppliers.get("sup2")
        assert supplier.balance == 5_000_000
        assert ledger_service.reconcile_supplier(bare_store, "sup2") is supplier

    def test_unknown_party(self, bare_store):
        with pytest.raises(RecordNotFoundError):
            ledger_service.reconcile_supplier(bare_store, "ghost")

    def test_supplier_balance_floor(self, bare_store):
        supplier = Supplier(id="s", name="S", phone="1", balance=10)
        assert apply_debt_delta(supplier, -20).balance == 0
