# Overview: AI assistant prompts for intake notes, debt collection and the dashboard.

"""
Assistant Service

Advice is optional. None of these calls raise on a service problem: the
outcome carries an error message for the user instead, the way
vat_service.parse_document does. Nothing here writes to the store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..store import ShopStore
from ..validation import require_text
from .document_intelligence import ConnectionCheck, DocumentParseError
from .ledger_service import record_outstanding
from .reporting_service import dashboard_summary


logger = logging.getLogger(__name__)


NOT_CONFIGURED = "AI assistant is not configured. Set GEMINI_API_KEY to enable it."
SERVICE_ERROR = "AI service error. Check the API key and try again."
EMPTY_ANSWER = "The AI assistant had nothing to suggest."

# Dashboard figures worth sending; lists and per-status breakdowns stay local
ANALYSIS_FIGURES = (
    "invoice_count",
    "revenue",
    "collected",
    "outstanding",
    "customer_debt",
    "supplier_debt",
    "active_repairs",
)


@dataclass(frozen=True)
class AdviceOutcome:
    text: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _ask(assistant, what: str, call) -> AdviceOutcome:
    if not assistant.configured:
        return AdviceOutcome(error=NOT_CONFIGURED)
    try:
        text = call()
    except DocumentParseError as e:
        logger.warning("Assistant %s failed: %s", what, e)
        return AdviceOutcome(error=SERVICE_ERROR)
    if not text:
        return AdviceOutcome(error=EMPTY_ANSWER)
    return AdviceOutcome(text=text)


def suggest_repair_note(assistant, symptoms: str | None) -> AdviceOutcome:
    """
    Raises:
        ValidationError: No symptoms to work from
    """
    symptoms = require_text(symptoms, "symptoms", label="Symptoms")
    return _ask(assistant, "repair note", lambda: assistant.suggest_repair_note(symptoms))


def debt_advice(store: ShopStore, assistant, customer_id: str) -> AdviceOutcome:
    """
    Raises:
        RecordNotFoundError: Unknown customer
    """
    customer = store.customers.get(customer_id)
    open_invoices = sum(
        1 for inv in store.invoices
        if inv.customer_id == customer.id and record_outstanding(inv) > 0
    )
    return _ask(
        assistant,
        "debt advice",
        lambda: assistant.debt_advice(customer.name, customer.balance, open_invoices),
    )


def business_analysis(
    store: ShopStore,
    assistant,
    *,
    start: str | None = None,
    end: str | None = None,
) -> tuple[dict, AdviceOutcome]:
    """
    Dashboard figures for the window plus the assistant's reading of them.

    Raises:
        ValueError: Bad start / end date
    """
    summary = dashboard_summary(store, start=start, end=end)
    figures = {key: summary[key] for key in ANALYSIS_FIGURES}
    figures["low_stock_products"] = len(summary["low_stock"])
    return summary, _ask(assistant, "business analysis", lambda: assistant.business_analysis(figures))


def check_connection(assistant, api_key: str | None = None) -> ConnectionCheck:
    """Try api_key, or the configured key when none is given."""
    check = assistant.validate_connection(api_key)
    logger.info("AI connection check: %s", "ok" if check.ok else check.message)
    return check
