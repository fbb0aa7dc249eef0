# Overview: Flask API routes for staff accounts.

from flask import Blueprint, request, jsonify, current_app, g

from ..extensions import get_store
from ..services import session_service
from ..services.record_store import RecordNotFoundError
from ..validation import ValidationError
from ..decorators import require_auth, require_permission


employees_bp = Blueprint("employees", __name__, url_prefix="/api/employees")


@employees_bp.get("")
@require_auth
@require_permission("VIEW_EMPLOYEES")
def list_employees_route():
    return jsonify({"employees": [e.to_dict() for e in get_store().employees]}), 200


@employees_bp.post("")
@require_auth
@require_permission("MANAGE_EMPLOYEES")
def add_employee_route():
    try:
        data = request.get_json(silent=True) or {}
        employee = session_service.add_employee(
            get_store(),
            g.current_user,
            name=data.get("name"),
            username=data.get("username"),
            role=data.get("role") or "SALES",
        )
        return jsonify({"employee": employee.to_dict()}), 201
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to add employee")
        return jsonify({"error": "Internal server error"}), 500


@employees_bp.delete("/<employee_id>")
@require_auth
@require_permission("MANAGE_EMPLOYEES")
def delete_employee_route(employee_id: str):
    try:
        session_service.delete_employee(get_store(), g.current_user, employee_id)
        return jsonify({"message": "Employee removed"}), 200
    except RecordNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to remove employee")
        return jsonify({"error": "Internal server error"}), 500
