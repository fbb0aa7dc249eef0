# Overview: Flask API routes for the repair workflow; parses input and returns JSON responses.

# backend/shopdesk/routes/repairs.py
"""
Repair ticket API routes

Transition permissions are checked inside repair_service against the
same table that drives the "actions" list returned with each ticket, so
the controls a client shows always match what the API will accept.

Status codes:
- 400 validation error, 403 permission denied, 404 unknown ticket,
  409 event not allowed from the ticket's current status
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..extensions import get_assistant, get_store
from ..services import assistant_service, repair_service
from ..services.document_service import build_intake_slip
from ..services.lifecycle_service import LifecycleError, RepairEvent
from ..services.permission_service import PermissionDeniedError
from ..services.record_store import RecordNotFoundError
from ..validation import ValidationError, optional_text
from ..decorators import require_auth, require_permission


repairs_bp = Blueprint("repairs", __name__, url_prefix="/api/repairs")


def _ticket_payload(ticket) -> dict:
    data = ticket.to_dict()
    data["actions"] = repair_service.ticket_actions(ticket, g.current_user.role)
    return data


def _draft(data: dict) -> dict:
    """Optional draft fields a transition may carry along."""
    draft = {}
    if "items" in data:
        draft["items"] = data.get("items") or []
    if data.get("diagnosis") is not None:
        draft["diagnosis"] = str(data["diagnosis"])
    if data.get("note") is not None:
        draft["note"] = str(data["note"])
    return draft


def _error_response(e: Exception, action: str):
    if isinstance(e, ValidationError):
        return jsonify({"error": str(e)}), 400
    if isinstance(e, PermissionDeniedError):
        return jsonify({
            "error": "Permission denied",
            "required_permission": e.permission_code,
            "message": str(e),
        }), 403
    if isinstance(e, RecordNotFoundError):
        return jsonify({"error": str(e)}), 404
    if isinstance(e, LifecycleError):
        return jsonify({"error": str(e)}), 409
    current_app.logger.exception("Failed to %s", action)
    return jsonify({"error": "Internal server error"}), 500


@repairs_bp.get("")
@require_auth
@require_permission("VIEW_REPAIR_TICKETS")
def list_tickets_route():
    """Tickets for ?tab=ACTIVE|COMPLETED|CANCELLED (default ACTIVE), newest first."""
    try:
        tickets = repair_service.list_tickets(get_store(), request.args.get("tab") or "ACTIVE")
        return jsonify({"tickets": [_ticket_payload(t) for t in tickets]}), 200
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400


@repairs_bp.post("")
@require_auth
@require_permission("CREATE_REPAIR_TICKET")
def create_ticket_route():
    """
    Receive a device.

    Body: {customer_id, device_info: {device_name, symptoms, ...}, note?, warehouse?}
    """
    try:
        data = request.get_json(silent=True) or {}
        ticket, slip = repair_service.create_ticket(
            get_store(),
            g.current_user,
            customer_id=data.get("customer_id"),
            device_info=data.get("device_info"),
            note=optional_text(data.get("note")) or "",
            warehouse=data.get("warehouse") or "TAY_PHAT",
        )
        return jsonify({"ticket": _ticket_payload(ticket), "intake_slip": slip}), 201
    except Exception as e:
        return _error_response(e, "create repair ticket")


@repairs_bp.post("/suggest-note")
@require_auth
@require_permission("CREATE_REPAIR_TICKET")
def suggest_note_route():
    """
    Draft an intake note from the customer's symptoms.

    Body: {symptoms}. Returns {note, error}; an AI problem is a 200 with
    error set so intake can go on without it.
    """
    try:
        data = request.get_json(silent=True) or {}
        outcome = assistant_service.suggest_repair_note(get_assistant(), data.get("symptoms"))
        return jsonify({"note": outcome.text, "error": outcome.error}), 200
    except Exception as e:
        return _error_response(e, "suggest repair note")


@repairs_bp.get("/<ticket_id>")
@require_auth
@require_permission("VIEW_REPAIR_TICKETS")
def get_ticket_route(ticket_id: str):
    try:
        return jsonify({"ticket": _ticket_payload(repair_service.get_ticket(get_store(), ticket_id))}), 200
    except RecordNotFoundError as e:
        return jsonify({"error": str(e)}), 404


@repairs_bp.get("/<ticket_id>/intake-slip")
@require_auth
@require_permission("VIEW_REPAIR_TICKETS")
def intake_slip_route(ticket_id: str):
    try:
        store = get_store()
        ticket = repair_service.get_ticket(store, ticket_id)
        return jsonify({"intake_slip": build_intake_slip(ticket, store.customers.find(ticket.customer_id))}), 200
    except RecordNotFoundError as e:
        return jsonify({"error": str(e)}), 404


@repairs_bp.post("/<ticket_id>/save")
@require_auth
@require_permission("VIEW_REPAIR_TICKETS")
def save_ticket_route(ticket_id: str):
    """
    Save diagnosis, note and line items.

    May escalate RECEIVED -> CHECKING (diagnosis entered) or
    CHECKING -> QUOTING (first line item), never both in one save.
    """
    try:
        data = request.get_json(silent=True) or {}
        ticket = repair_service.save_ticket(get_store(), g.current_user, ticket_id, **_draft(data))
        return jsonify({"ticket": _ticket_payload(ticket)}), 200
    except Exception as e:
        return _error_response(e, "save repair ticket")


_TRANSITIONS = {
    "send-quote": RepairEvent.SEND_QUOTE,
    "approve": RepairEvent.APPROVE_QUOTE,
    "finish": RepairEvent.MARK_FINISHED,
}


@repairs_bp.post("/<ticket_id>/<action>")
@require_auth
@require_permission("VIEW_REPAIR_TICKETS")
def transition_route(ticket_id: str, action: str):
    """send-quote, approve or finish; the body may carry the current draft."""
    event = _TRANSITIONS.get(action)
    if event is None:
        return jsonify({"error": f"Unknown action '{action}'"}), 404
    try:
        data = request.get_json(silent=True) or {}
        ticket = repair_service.save_ticket(
            get_store(), g.current_user, ticket_id, event=event, **_draft(data)
        )
        return jsonify({"ticket": _ticket_payload(ticket)}), 200
    except Exception as e:
        return _error_response(e, f"{action} repair ticket")


@repairs_bp.get("/<ticket_id>/payment-proposal")
@require_auth
@require_permission("DELIVER_REPAIR")
def payment_proposal_route(ticket_id: str):
    """Amount to pre-fill at delivery: the recomputed ticket total."""
    try:
        amount = repair_service.propose_payment(get_store(), ticket_id)
        return jsonify({"ticket_id": ticket_id, "amount": amount}), 200
    except RecordNotFoundError as e:
        return jsonify({"error": str(e)}), 404


@repairs_bp.post("/<ticket_id>/deliver")
@require_auth
@require_permission("DELIVER_REPAIR")
def deliver_route(ticket_id: str):
    """
    Confirm payment and hand the device back.

    Body: {payment_amount?, items?, diagnosis?, note?}. The receipt in the
    response is built from the committed ticket.
    """
    try:
        data = request.get_json(silent=True) or {}
        result = repair_service.confirm_delivery(
            get_store(),
            g.current_user,
            ticket_id,
            data.get("payment_amount"),
            **_draft(data),
        )
        return jsonify({
            "ticket": _ticket_payload(result.ticket),
            "customer": result.customer.to_dict(),
            "receipt": result.receipt,
            "change_due": result.change_due,
            "debt_delta": result.debt_delta,
        }), 200
    except Exception as e:
        return _error_response(e, "deliver repair ticket")


@repairs_bp.post("/<ticket_id>/cancel")
@require_auth
@require_permission("CANCEL_REPAIR")
def cancel_route(ticket_id: str):
    try:
        data = request.get_json(silent=True) or {}
        ticket = repair_service.cancel_ticket(get_store(), g.current_user, ticket_id, data.get("reason"))
        return jsonify({"ticket": _ticket_payload(ticket)}), 200
    except Exception as e:
        return _error_response(e, "cancel repair ticket")
