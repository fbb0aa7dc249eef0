# Overview: Flask API routes for VAT invoice capture, filtering and document parsing.

# backend/shopdesk/routes/vat_invoices.py
"""
VAT invoice API routes

Parsing never fails the request: a document service problem comes back
as 200 with "error" set and the submitted form unchanged, so the user
can continue by hand.
"""

import base64
import binascii

from flask import Blueprint, request, jsonify, g, current_app

from ..extensions import get_store, get_document_parser
from ..services import vat_service
from ..services.record_store import RecordNotFoundError
from ..validation import ValidationError
from ..decorators import require_auth, require_permission


vat_invoices_bp = Blueprint("vat_invoices", __name__, url_prefix="/api/vat-invoices")


@vat_invoices_bp.get("")
@require_auth
@require_permission("VIEW_VAT_INVOICES")
def list_vat_invoices_route():
    """Query: search, warehouse, direction, start_date, end_date ("ALL" disables a filter)."""
    invoices = vat_service.filter_vat_invoices(
        get_store(),
        search=request.args.get("search"),
        warehouse=request.args.get("warehouse"),
        direction=request.args.get("direction"),
        start_date=request.args.get("start_date"),
        end_date=request.args.get("end_date"),
    )
    return jsonify({"vat_invoices": [inv.to_dict() for inv in invoices]}), 200


def _save(invoice_id=None):
    try:
        data = request.get_json(silent=True) or {}
        invoice = vat_service.save_vat_invoice(get_store(), g.current_user, data, invoice_id)
        return jsonify({"vat_invoice": invoice.to_dict()}), 200 if invoice_id else 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except RecordNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to save VAT invoice")
        return jsonify({"error": "Internal server error"}), 500


@vat_invoices_bp.post("")
@require_auth
@require_permission("MANAGE_VAT_INVOICES")
def create_vat_invoice_route():
    return _save()


@vat_invoices_bp.put("/<invoice_id>")
@require_auth
@require_permission("MANAGE_VAT_INVOICES")
def update_vat_invoice_route(invoice_id: str):
    return _save(invoice_id)


@vat_invoices_bp.post("/<invoice_id>/sync")
@require_auth
@require_permission("MANAGE_VAT_INVOICES")
def sync_vat_invoice_route(invoice_id: str):
    try:
        invoice = vat_service.mark_synced(get_store(), g.current_user, invoice_id)
        return jsonify({"vat_invoice": invoice.to_dict()}), 200
    except RecordNotFoundError as e:
        return jsonify({"error": str(e)}), 404


@vat_invoices_bp.post("/parse")
@require_auth
@require_permission("PARSE_DOCUMENTS")
def parse_document_route():
    """
    Extract a draft VAT invoice.

    Body: {text} or {image_base64, mime_type}, plus the current form.
    Returns {form, error}; error is null on success.
    """
    data = request.get_json(silent=True) or {}
    form = data.get("form") if isinstance(data.get("form"), dict) else {}

    image = None
    if data.get("image_base64"):
        try:
            image = base64.b64decode(data["image_base64"], validate=True)
        except (binascii.Error, ValueError):
            return jsonify({"form": form, "error": "Image is not valid base64"}), 400

    outcome = vat_service.parse_document(
        get_document_parser(),
        form,
        text=data.get("text"),
        data=image,
        mime_type=data.get("mime_type"),
    )
    return jsonify({"form": outcome.form, "error": outcome.error}), 200
