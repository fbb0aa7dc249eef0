# Overview: VAT (red) invoice capture: totals, save/replace, filters, parsed drafts.

"""
VAT Invoice Service

VAT invoices are bookkeeping records only. They never touch parties,
stock or the debt ledger.

TOTALS:
- line.total = quantity * unit_price (rounded to whole dong)
- total_before_tax = sum of line totals
- tax_amount = round_half_up(total_before_tax * tax_rate / 100)
- total_amount = total_before_tax + tax_amount

Saving (create or edit) always resets status to PENDING; SYNCED is only
set by mark_synced().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from ..models import DEFAULT_TAX_RATE, Employee, VATDirection, VATInvoice, VATInvoiceLine, VATStatus, Warehouse
from ..store import ShopStore
from ..time_utils import today_iso
from ..validation import ValidationError, coerce_number, require_choice, require_text
from .document_intelligence import DocumentParseError
from .identifier_service import PREFIX_VAT, next_record_id
from .permission_service import require_permission


logger = logging.getLogger(__name__)


def _round_dong(value) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def build_vat_lines(raw_items) -> tuple[VATInvoiceLine, ...]:
    """Lines from [{product_name, unit, quantity, unit_price}], totals recomputed."""
    if raw_items is None:
        return ()
    if not isinstance(raw_items, (list, tuple)):
        raise ValidationError("items must be a list")

    lines = []
    for index, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            raise ValidationError(f"items[{index}] must be an object")
        quantity = coerce_number(raw.get("quantity", 1), f"items[{index}].quantity")
        unit_price = _round_dong(coerce_number(raw.get("unit_price", 0), f"items[{index}].unit_price"))
        lines.append(VATInvoiceLine(
            product_name=str(raw.get("product_name") or "").strip(),
            unit=str(raw.get("unit") or "").strip(),
            quantity=quantity,
            unit_price=unit_price,
            total=_round_dong(Decimal(str(quantity)) * unit_price),
        ))
    return tuple(lines)


def compute_totals(lines, tax_rate) -> tuple[int, int, int]:
    """
    Returns:
        (total_before_tax, tax_amount, total_amount)
    """
    total_before = sum(line.total for line in lines)
    tax = _round_dong(Decimal(total_before) * Decimal(str(tax_rate)) / Decimal(100))
    return total_before, tax, total_before + tax


def save_vat_invoice(store: ShopStore, actor: Employee, data: dict, invoice_id: str | None = None) -> VATInvoice:
    """
    Create a VAT invoice, or replace invoice_id when editing.

    Raises:
        ValidationError: Missing invoice number or partner, bad values
        RecordNotFoundError: invoice_id given but unknown
    """
    require_permission(actor, "MANAGE_VAT_INVOICES")

    if invoice_id is not None:
        store.vat_invoices.get(invoice_id)

    invoice_number = require_text(data.get("invoice_number"), "invoice_number", label="Invoice number")
    partner_name = require_text(data.get("partner_name"), "partner_name", label="Partner name")
    direction = require_choice(data.get("direction") or VATDirection.IN, "direction", VATDirection.all())
    warehouse = require_choice(data.get("warehouse") or Warehouse.TAY_PHAT, "warehouse", Warehouse.all())
    raw_rate = data.get("tax_rate")
    tax_rate = coerce_number(DEFAULT_TAX_RATE if raw_rate is None else raw_rate, "tax_rate")

    lines = build_vat_lines(data.get("items"))
    total_before, tax, total = compute_totals(lines, tax_rate)

    invoice = VATInvoice(
        id=invoice_id or next_record_id(store, PREFIX_VAT),
        invoice_number=invoice_number,
        date=(data.get("date") or "").strip() or today_iso(),
        partner_name=partner_name,
        tax_code=str(data.get("tax_code") or "").strip(),
        items=lines,
        total_before_tax=total_before,
        tax_rate=tax_rate,
        tax_amount=tax,
        total_amount=total,
        direction=direction,
        warehouse=warehouse,
        status=VATStatus.PENDING,
    )

    if invoice_id is not None:
        store.commit(store.vat_invoices.replace_by_id(invoice_id, invoice))
        logger.info("VAT invoice %s updated by %s", invoice_id, actor.id)
    else:
        store.commit(store.vat_invoices.insert(invoice))
        logger.info("VAT invoice %s (%s) added by %s", invoice.id, invoice_number, actor.id)
    return invoice


def mark_synced(store: ShopStore, actor: Employee, invoice_id: str) -> VATInvoice:
    require_permission(actor, "MANAGE_VAT_INVOICES")
    collection, updated = store.vat_invoices.patch_by_id(invoice_id, status=VATStatus.SYNCED)
    store.commit(collection)
    return updated


def filter_vat_invoices(
    store: ShopStore,
    *,
    search: str | None = None,
    warehouse: str | None = None,
    direction: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
) -> list[VATInvoice]:
    """
    Search matches invoice number or partner name (case-insensitive) or
    tax code. Dates compare as ISO strings, both ends inclusive.
    """
    needle = (search or "").strip().lower()

    def matches(inv: VATInvoice) -> bool:
        if needle and not (
            needle in inv.invoice_number.lower()
            or needle in inv.partner_name.lower()
            or needle in inv.tax_code
        ):
            return False
        if warehouse and warehouse != "ALL" and inv.warehouse != warehouse:
            return False
        if direction and direction != "ALL" and inv.direction != direction:
            return False
        if start_date and inv.date < start_date:
            return False
        if end_date and inv.date > end_date:
            return False
        return True

    return store.vat_invoices.filter(matches)


def apply_parsed_result(form: dict, result: dict | None) -> dict:
    """
    Merge a parsed draft into a VAT form.

    Unknown direction / company values keep the form's current choice.
    Totals are recomputed from the parsed lines at the parsed tax rate
    (default 10).
    """
    if not result:
        return dict(form)

    merged = dict(form)
    if result.get("type") in VATDirection.all():
        merged["direction"] = result["type"]
    if result.get("internalCompany") in Warehouse.all():
        merged["warehouse"] = result["internalCompany"]

    merged["invoice_number"] = result.get("invoiceNumber") or ""
    merged["date"] = result.get("date") or ""
    merged["partner_name"] = result.get("partnerName") or ""
    merged["tax_code"] = result.get("taxCode") or ""
    merged["tax_rate"] = result.get("taxRate") or DEFAULT_TAX_RATE

    lines = build_vat_lines([
        {
            "product_name": item.get("productName"),
            "unit": item.get("unit"),
            "quantity": item.get("quantity") or 0,
            "unit_price": item.get("unitPrice") or 0,
        }
        for item in (result.get("items") or [])
        if isinstance(item, dict)
    ])
    merged["items"] = [line.to_dict() for line in lines]
    total_before, tax, total = compute_totals(lines, merged["tax_rate"])
    merged.update(total_before_tax=total_before, tax_amount=tax, total_amount=total)
    return merged


@dataclass(frozen=True)
class ParseOutcome:
    form: dict
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_document(
    parser,
    form: dict | None = None,
    *,
    text: str | None = None,
    data: bytes | None = None,
    mime_type: str | None = None,
) -> ParseOutcome:
    """
    Run the document parser and merge its answer into the form.

    Failures never raise: the form comes back unchanged with an error
    message for the user to see, and they can fill it in by hand.
    """
    form = dict(form or {})

    if text is None and data is None:
        return ParseOutcome(form, "Provide invoice text or an image")
    if text is not None and not text.strip():
        return ParseOutcome(form, "Nothing to parse")
    if text is None and not (mime_type or "").startswith("image/"):
        return ParseOutcome(form, "Only invoice text or image files are supported")

    try:
        if text is not None:
            result = parser.parse_from_text(text)
        else:
            result = parser.parse_from_image(data, mime_type)
        if not result:
            return ParseOutcome(form, "Could not extract anything (empty result)")
        return ParseOutcome(apply_parsed_result(form, result))
    except DocumentParseError as e:
        logger.warning("Document parsing failed: %s", e)
        return ParseOutcome(form, "Document service error. Check the API key and try again.")
    except ValidationError as e:
        return ParseOutcome(form, f"Parsed document is unusable: {e}")
