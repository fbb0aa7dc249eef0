# Overview: Flask API routes for login, logout and the current session.

# backend/shopdesk/routes/auth.py
"""
Authentication API routes

Staff log in with their username and the shop's shared password. The
returned token goes in the Authorization header as "Bearer <token>".
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..extensions import get_store
from ..permissions import allowed_views
from ..services import session_service
from ..services import permission_service
from ..services.session_service import AuthenticationError
from ..decorators import require_auth
from shopdesk.time_utils import to_utc_z


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _session_payload(context) -> dict:
    employee = context.employee
    return {
        "user": employee.to_dict(),
        "permissions": permission_service.get_user_permissions(employee),
        "views": allowed_views(employee.role),
        "landing_view": context.landing_view,
        "expires_at": to_utc_z(context.session.expires_at),
    }


@auth_bp.post("/login")
def login_route():
    """
    Authenticate a staff member and create a session token.
    """
    try:
        data = request.get_json(silent=True) or {}
        username = data.get("username")
        password = data.get("password")

        if not all([username, password]):
            return jsonify({"error": "username and password required"}), 400

        context, token = session_service.login(
            get_store(),
            username,
            password,
            expected_password=current_app.config["SHOPDESK_LOGIN_PASSWORD"],
        )
        payload = _session_payload(context)
        payload.update({"token": token, "message": "Login successful"})
        return jsonify(payload), 200

    except AuthenticationError:
        return jsonify({"error": "Invalid credentials"}), 401
    except Exception:
        current_app.logger.exception("Failed to login user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/logout")
@require_auth
def logout_route():
    """Revoke the current session. Shop data is untouched."""
    session_service.logout(get_store(), g.token)
    return jsonify({"message": "Logged out"}), 200


@auth_bp.get("/me")
@require_auth
def me_route():
    return jsonify(_session_payload(g.session_context)), 200
