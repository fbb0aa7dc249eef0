# Overview: Flask API routes for the product catalogue.

from flask import Blueprint, request, jsonify, current_app

from ..extensions import get_store
from ..services import inventory_service
from ..services.record_store import RecordNotFoundError
from ..validation import ValidationError
from ..decorators import require_auth, require_permission, require_any_permission


products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_auth
@require_any_permission("VIEW_INVENTORY", "VIEW_POS")
def list_products_route():
    """Catalogue, optionally filtered by ?q= (name or SKU)."""
    products = inventory_service.search_products(get_store(), request.args.get("q"))
    return jsonify({"products": [p.to_dict() for p in products]}), 200


@products_bp.get("/<product_id>")
@require_auth
@require_any_permission("VIEW_INVENTORY", "VIEW_POS")
def get_product_route(product_id: str):
    try:
        return jsonify({"product": get_store().products.get(product_id).to_dict()}), 200
    except RecordNotFoundError as e:
        return jsonify({"error": str(e)}), 404


@products_bp.post("")
@require_auth
@require_permission("MANAGE_PRODUCTS")
def save_product_route():
    """
    Add a product, or replace the one named by the body's id (404 if unknown).
    """
    try:
        data = request.get_json(silent=True) or {}
        store = get_store()
        product = inventory_service.build_product(
            store,
            name=data.get("name"),
            sku=data.get("sku"),
            product_type=data.get("product_type") or "GOODS",
            price=data.get("price"),
            cost_price=data.get("cost_price", 0),
            unit=data.get("unit") or "",
            stock=data.get("stock"),
            product_id=data.get("id"),
        )
        existed = store.products.find(product.id) is not None
        inventory_service.upsert_product(store, product)
        return jsonify({"product": product.to_dict()}), 200 if existed else 201
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except RecordNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except Exception:
        current_app.logger.exception("Failed to save product")
        return jsonify({"error": "Internal server error"}), 500
