# Overview: Flask API routes for POS checkout, invoices and debt payments.

# backend/shopdesk/routes/sales.py
"""Sales and invoice API routes with permission enforcement"""

from flask import Blueprint, request, jsonify, g, current_app

from ..extensions import get_store
from ..services import sales_service
from ..services.document_service import build_receipt
from ..services.lifecycle_service import LifecycleError
from ..services.permission_service import PermissionDeniedError
from ..services.record_store import RecordNotFoundError
from ..validation import ValidationError
from ..decorators import require_auth, require_permission, require_any_permission


sales_bp = Blueprint("sales", __name__, url_prefix="/api")


def _payment_payload(result) -> dict:
    return {
        "invoice": result.invoice.to_dict(),
        "customer": result.customer.to_dict(),
        "receipt": result.receipt,
        "change_due": result.change_due,
    }


@sales_bp.post("/sales/checkout")
@require_auth
@require_permission("CREATE_SALE")
def checkout_route():
    """
    Check out a counter sale.

    Body: {customer_id, items: [{product_id, quantity, price?}],
           paid_amount?, warehouse?, note?}
    """
    try:
        data = request.get_json(silent=True) or {}
        result = sales_service.checkout(
            get_store(),
            g.current_user,
            customer_id=data.get("customer_id"),
            items=data.get("items"),
            paid_amount=data.get("paid_amount"),
            warehouse=data.get("warehouse") or "TAY_PHAT",
            note=data.get("note") or "",
        )
        return jsonify(_payment_payload(result)), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except RecordNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to check out sale")
        return jsonify({"error": "Internal server error"}), 500


@sales_bp.get("/invoices")
@require_auth
@require_any_permission("VIEW_DEBT", "VIEW_POS", "VIEW_DASHBOARD")
def list_invoices_route():
    invoices = sales_service.list_invoices(
        get_store(),
        customer_id=request.args.get("customer_id"),
        invoice_type=request.args.get("invoice_type"),
        status=request.args.get("status"),
    )
    return jsonify({"invoices": [inv.to_dict() for inv in invoices]}), 200


@sales_bp.get("/invoices/<invoice_id>")
@require_auth
@require_any_permission("VIEW_DEBT", "VIEW_POS", "VIEW_REPAIR_TICKETS")
def get_invoice_route(invoice_id: str):
    try:
        return jsonify({"invoice": get_store().invoices.get(invoice_id).to_dict()}), 200
    except RecordNotFoundError as e:
        return jsonify({"error": str(e)}), 404


@sales_bp.get("/invoices/<invoice_id>/receipt")
@require_auth
@require_any_permission("VIEW_DEBT", "VIEW_POS", "VIEW_REPAIR_TICKETS")
def invoice_receipt_route(invoice_id: str):
    try:
        store = get_store()
        invoice = store.invoices.get(invoice_id)
        return jsonify({"receipt": build_receipt(invoice, store.customers.find(invoice.customer_id))}), 200
    except RecordNotFoundError as e:
        return jsonify({"error": str(e)}), 404


@sales_bp.post("/invoices/<invoice_id>/payments")
@require_auth
@require_permission("COLLECT_PAYMENT")
def collect_payment_route(invoice_id: str):
    """Record a debt payment. Body: {amount}"""
    try:
        data = request.get_json(silent=True) or {}
        result = sales_service.collect_payment(get_store(), g.current_user, invoice_id, data.get("amount"))
        return jsonify(_payment_payload(result)), 200

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except RecordNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except LifecycleError as e:
        return jsonify({"error": str(e)}), 409
    except Exception:
        current_app.logger.exception("Failed to collect payment")
        return jsonify({"error": "Internal server error"}), 500


@sales_bp.post("/invoices/<invoice_id>/cancel")
@require_auth
@require_permission("CANCEL_INVOICE")
def cancel_invoice_route(invoice_id: str):
    try:
        data = request.get_json(silent=True) or {}
        invoice = sales_service.cancel_invoice(get_store(), g.current_user, invoice_id, data.get("reason"))
        return jsonify({"invoice": invoice.to_dict()}), 200

    except RecordNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except LifecycleError as e:
        return jsonify({"error": str(e)}), 409
    except PermissionDeniedError as e:
        return jsonify({"error": "Permission denied", "message": str(e)}), 403
    except Exception:
        current_app.logger.exception("Failed to cancel invoice")
        return jsonify({"error": "Internal server error"}), 500
