# Overview: Flask API routes for suppliers and what the shop owes them.

from flask import Blueprint, request, jsonify, current_app, g

from ..extensions import get_store
from ..services import ledger_service, party_service
from ..services.record_store import RecordNotFoundError
from ..validation import ValidationError
from ..decorators import require_auth, require_permission, require_any_permission


suppliers_bp = Blueprint("suppliers", __name__, url_prefix="/api/suppliers")


@suppliers_bp.get("")
@require_auth
@require_any_permission("VIEW_SUPPLIERS", "VIEW_IMPORT_GOODS")
def list_suppliers_route():
    return jsonify({"suppliers": [s.to_dict() for s in get_store().suppliers]}), 200


@suppliers_bp.post("")
@require_auth
@require_permission("MANAGE_SUPPLIERS")
def create_supplier_route():
    try:
        data = request.get_json(silent=True) or {}
        supplier = party_service.create_supplier(
            get_store(),
            g.current_user,
            name=data.get("name"),
            phone=data.get("phone"),
            address=data.get("address"),
            contact_person=data.get("contact_person"),
        )
        return jsonify({"supplier": supplier.to_dict()}), 201
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create supplier")
        return jsonify({"error": "Internal server error"}), 500


@suppliers_bp.get("/debt")
@require_auth
@require_permission("VIEW_SUPPLIERS")
def supplier_debt_route():
    return jsonify({"suppliers": party_service.supplier_debt_overview(get_store())}), 200


@suppliers_bp.post("/<supplier_id>/reconcile")
@require_auth
@require_permission("RECONCILE_BALANCES")
def reconcile_supplier_route(supplier_id: str):
    try:
        store = get_store()
        before = store.suppliers.get(supplier_id).balance
        supplier = ledger_service.reconcile_supplier(store, supplier_id)
        return jsonify({
            "supplier": supplier.to_dict(),
            "previous_balance": before,
            "corrected": before != supplier.balance,
        }), 200
    except RecordNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to reconcile supplier")
        return jsonify({"error": "Internal server error"}), 500
