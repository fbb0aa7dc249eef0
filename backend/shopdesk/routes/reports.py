# Overview: Flask API routes for stock, dashboard and debt-journal reports.

# backend/shopdesk/routes/reports.py
"""
Reporting API routes.

All figures are derived on read from the current store; nothing is cached.
"""

from flask import Blueprint, request, jsonify

from ..extensions import get_assistant, get_store
from ..services import assistant_service, reporting_service
from ..services.ledger_service import list_debt_events
from ..validation import ValidationError, coerce_int
from ..decorators import require_auth, require_permission


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/stock")
@require_auth
@require_permission("VIEW_STOCK_REPORT")
def stock_report_route():
    return jsonify({"products": reporting_service.stock_report(get_store())}), 200


@reports_bp.get("/dashboard")
@require_auth
@require_permission("VIEW_DASHBOARD")
def dashboard_route():
    """Query: start_date, end_date (ISO 8601, optional)."""
    try:
        summary = reporting_service.dashboard_summary(
            get_store(),
            start=request.args.get("start_date"),
            end=request.args.get("end_date"),
        )
        return jsonify(summary), 200
    except ValueError:
        return jsonify({"error": "Invalid date format (use ISO 8601)"}), 400


@reports_bp.get("/debt-events")
@require_auth
@require_permission("VIEW_DEBT")
def debt_events_route():
    """Debt journal, newest first. Query: party_id?, limit? (default 200)"""
    try:
        limit = coerce_int(request.args.get("limit", 200), "limit", minimum=1, maximum=1000)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    events = list_debt_events(get_store(), party_id=request.args.get("party_id"), limit=limit)
    return jsonify({"events": [event.to_dict() for event in events]}), 200


@reports_bp.get("/business-analysis")
@require_auth
@require_permission("VIEW_DASHBOARD")
def business_analysis_route():
    """Dashboard figures plus the AI assistant's reading. Query as /dashboard."""
    try:
        summary, outcome = assistant_service.business_analysis(
            get_store(),
            get_assistant(),
            start=request.args.get("start_date"),
            end=request.args.get("end_date"),
        )
    except ValueError:
        return jsonify({"error": "Invalid date format (use ISO 8601)"}), 400
    return jsonify({"summary": summary, "analysis": outcome.text, "error": outcome.error}), 200
