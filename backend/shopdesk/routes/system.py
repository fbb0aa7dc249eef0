# backend/shopdesk/routes/system.py
"""
System health, version and AI connection endpoints.
"""

from flask import Blueprint, current_app, jsonify, request

from ..decorators import require_auth, require_permission
from ..extensions import get_assistant, get_store
from ..services import assistant_service
from ..store import COLLECTION_NAMES
from shopdesk.time_utils import utcnow, to_utc_z

system_bp = Blueprint("system", __name__)

VERSION = "1.0.0"


@system_bp.get("/health")
def health_route():
    """Liveness plus record counts per collection."""
    store = get_store()
    return jsonify({
        "status": "healthy",
        "time": to_utc_z(utcnow()),
        "version": VERSION,
        "document_parsing": bool(current_app.config.get("GEMINI_API_KEY")),
        "collections": {name: len(store.collection(name)) for name in COLLECTION_NAMES},
        "active_sessions": len(store.sessions),
    }), 200


@system_bp.get("/version")
def version_route():
    return jsonify({"version": VERSION}), 200


@system_bp.post("/api/ai/connection")
@require_auth
@require_permission("CONFIGURE_AI")
def ai_connection_route():
    """
    Check an AI service key with a trivial request.

    Body: {api_key?}; without one the configured key is tried.
    """
    data = request.get_json(silent=True) or {}
    check = assistant_service.check_connection(get_assistant(), data.get("api_key"))
    return jsonify({"ok": check.ok, "message": check.message}), 200
