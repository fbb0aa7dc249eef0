# Overview: Flask API routes for customers and customer debt.

from flask import Blueprint, request, jsonify, current_app, g

from ..extensions import get_assistant, get_store
from ..services import assistant_service, ledger_service, party_service
from ..services.record_store import RecordNotFoundError
from ..validation import ValidationError
from ..decorators import require_auth, require_permission, require_any_permission


customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.get("")
@require_auth
@require_any_permission("VIEW_CUSTOMERS", "VIEW_POS", "VIEW_REPAIR_TICKETS")
def list_customers_route():
    customers = party_service.search_customers(get_store(), request.args.get("q"))
    return jsonify({"customers": [c.to_dict() for c in customers]}), 200


@customers_bp.post("")
@require_auth
@require_any_permission("MANAGE_CUSTOMERS", "CREATE_REPAIR_TICKET")
def create_customer_route():
    """
    Create a customer. Intake staff may add one on the spot while
    receiving a device.
    """
    try:
        data = request.get_json(silent=True) or {}
        customer = party_service.create_customer(
            get_store(),
            g.current_user,
            name=data.get("name"),
            phone=data.get("phone"),
            address=data.get("address"),
        )
        return jsonify({"customer": customer.to_dict()}), 201
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create customer")
        return jsonify({"error": "Internal server error"}), 500


@customers_bp.patch("/<customer_id>")
@require_auth
@require_permission("MANAGE_CUSTOMERS")
def update_customer_route(customer_id: str):
    try:
        data = request.get_json(silent=True) or {}
        customer = party_service.update_customer(
            get_store(),
            g.current_user,
            customer_id,
            name=data.get("name"),
            phone=data.get("phone"),
            address=data.get("address"),
        )
        return jsonify({"customer": customer.to_dict()}), 200
    except RecordNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to update customer")
        return jsonify({"error": "Internal server error"}), 500


@customers_bp.get("/debt")
@require_auth
@require_permission("VIEW_DEBT")
def customer_debt_route():
    return jsonify({"customers": party_service.customer_debt_overview(get_store())}), 200


@customers_bp.get("/<customer_id>/debt-events")
@require_auth
@require_permission("VIEW_DEBT")
def customer_debt_events_route(customer_id: str):
    events = ledger_service.list_debt_events(get_store(), party_id=customer_id)
    return jsonify({"events": [ev.to_dict() for ev in events]}), 200


@customers_bp.post("/<customer_id>/reconcile")
@require_auth
@require_permission("RECONCILE_BALANCES")
def reconcile_customer_route(customer_id: str):
    """Recompute the balance from the customer's invoices."""
    try:
        store = get_store()
        before = store.customers.get(customer_id).balance
        customer = ledger_service.reconcile_customer(store, customer_id)
        return jsonify({
            "customer": customer.to_dict(),
            "previous_balance": before,
            "corrected": before != customer.balance,
        }), 200
    except RecordNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to reconcile customer")
        return jsonify({"error": "Internal server error"}), 500


@customers_bp.get("/<customer_id>/debt-advice")
@require_auth
@require_permission("VIEW_DEBT")
def customer_debt_advice_route(customer_id: str):
    """AI collection advice for one customer. Returns {advice, error}."""
    try:
        outcome = assistant_service.debt_advice(get_store(), get_assistant(), customer_id)
        return jsonify({"advice": outcome.text, "error": outcome.error}), 200
    except RecordNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to build debt advice")
        return jsonify({"error": "Internal server error"}), 500
