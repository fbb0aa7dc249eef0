# Overview: Flask API routes for import-goods purchase orders.

# backend/shopdesk/routes/purchases.py
"""Purchase order API routes"""

from flask import Blueprint, request, jsonify, g, current_app

from ..extensions import get_store
from ..services import purchasing_service
from ..services.record_store import RecordNotFoundError
from ..validation import ValidationError
from ..decorators import require_auth, require_permission, require_any_permission


purchases_bp = Blueprint("purchases", __name__, url_prefix="/api/purchase-orders")


@purchases_bp.get("")
@require_auth
@require_any_permission("VIEW_IMPORT_GOODS", "VIEW_SUPPLIERS")
def list_purchase_orders_route():
    orders = purchasing_service.list_purchase_orders(get_store(), supplier_id=request.args.get("supplier_id"))
    return jsonify({"purchase_orders": [po.to_dict() for po in orders]}), 200


@purchases_bp.post("")
@require_auth
@require_permission("IMPORT_GOODS")
def import_goods_route():
    """
    Confirm an import.

    Body: {supplier_id, warehouse, items: [{product_id, quantity, import_price}], paid_amount?}

    The order is final once created: supplier debt and stock are updated
    in the same request.
    """
    try:
        data = request.get_json(silent=True) or {}
        store = get_store()
        po = purchasing_service.import_goods(
            store,
            g.current_user,
            supplier_id=data.get("supplier_id"),
            warehouse=data.get("warehouse") or "TAY_PHAT",
            items=data.get("items"),
            paid_amount=data.get("paid_amount", 0),
        )
        return jsonify({
            "purchase_order": po.to_dict(),
            "supplier": store.suppliers.get(po.supplier_id).to_dict(),
        }), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except RecordNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to import goods")
        return jsonify({"error": "Internal server error"}), 500
