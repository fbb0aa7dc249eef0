# Overview: Pure repair-ticket state machine; no store access.

"""
Repair Ticket Lifecycle

================================================================================
STATE MACHINE
================================================================================

    RECEIVED -> CHECKING -> QUOTING -> IN_PROGRESS -> COMPLETED -> DELIVERED

    CANCELLED:     reachable from any non-terminal state (CANCEL event)
    WAITING_PARTS: declared state with no transitions in or out; a ticket
                   holding it can still be saved and cancelled

TRANSITIONS (event, from -> to, permission):
    SAVE           any -> same or implicit escalation (see below)
    SEND_QUOTE     CHECKING    -> QUOTING       QUOTE_REPAIR
    APPROVE_QUOTE  QUOTING     -> IN_PROGRESS   APPROVE_REPAIR_QUOTE
    MARK_FINISHED  IN_PROGRESS -> COMPLETED     COMPLETE_REPAIR
    DELIVER        COMPLETED   -> DELIVERED     DELIVER_REPAIR
    CANCEL         non-terminal -> CANCELLED    CANCEL_REPAIR

IMPLICIT ESCALATION ON SAVE (at most one per save, checked in this order):
    1. RECEIVED and the saved diagnosis is non-empty      -> CHECKING
    2. CHECKING and the saved draft has >= 1 line item    -> QUOTING
    3. otherwise the status is unchanged

A diagnosis and a first line item entered in the same save from RECEIVED
therefore land on CHECKING, never QUOTING.

Everything here is a pure function of (current status, event, snapshot).
Persistence and ledger effects live in repair_service.
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass

from ..models import RepairStatus


class RepairEvent:
    SAVE = "SAVE"
    SEND_QUOTE = "SEND_QUOTE"
    APPROVE_QUOTE = "APPROVE_QUOTE"
    MARK_FINISHED = "MARK_FINISHED"
    DELIVER = "DELIVER"
    CANCEL = "CANCEL"

    @classmethod
    def all(cls) -> list[str]:
        return [
            cls.SAVE, cls.SEND_QUOTE, cls.APPROVE_QUOTE,
            cls.MARK_FINISHED, cls.DELIVER, cls.CANCEL,
        ]


# Explicit events: event -> (required current status, next status)
EXPLICIT_TRANSITIONS: dict[str, tuple[str, str]] = {
    RepairEvent.SEND_QUOTE: (RepairStatus.CHECKING, RepairStatus.QUOTING),
    RepairEvent.APPROVE_QUOTE: (RepairStatus.QUOTING, RepairStatus.IN_PROGRESS),
    RepairEvent.MARK_FINISHED: (RepairStatus.IN_PROGRESS, RepairStatus.COMPLETED),
    RepairEvent.DELIVER: (RepairStatus.COMPLETED, RepairStatus.DELIVERED),
}

# Permission required to move a ticket from one status to another
TRANSITION_PERMISSIONS: dict[tuple[str, str], str] = {
    (RepairStatus.RECEIVED, RepairStatus.CHECKING): "DIAGNOSE_REPAIR",
    (RepairStatus.CHECKING, RepairStatus.QUOTING): "QUOTE_REPAIR",
    (RepairStatus.QUOTING, RepairStatus.IN_PROGRESS): "APPROVE_REPAIR_QUOTE",
    (RepairStatus.IN_PROGRESS, RepairStatus.COMPLETED): "COMPLETE_REPAIR",
    (RepairStatus.COMPLETED, RepairStatus.DELIVERED): "DELIVER_REPAIR",
}

SAVE_PERMISSION = "SAVE_REPAIR_TICKET"
CANCEL_PERMISSION = "CANCEL_REPAIR"

# Human-readable labels for transition controls
EVENT_LABELS: dict[str, str] = {
    RepairEvent.SEND_QUOTE: "Send Quote",
    RepairEvent.APPROVE_QUOTE: "Customer Approved",
    RepairEvent.MARK_FINISHED: "Mark Finished",
    RepairEvent.DELIVER: "Confirm Payment & Deliver",
    RepairEvent.CANCEL: "Cancel Ticket",
}


class LifecycleError(ValueError):
    """
    Raised when an event is not allowed from the ticket's current status.

    This is a domain error: the request is well-formed but the ticket is in
    the wrong state for it.
    """


@dataclass(frozen=True)
class TicketSnapshot:
    """The parts of a ticket draft that drive implicit escalation."""
    diagnosis: str = ""
    line_count: int = 0

    @property
    def has_diagnosis(self) -> bool:
        return bool(self.diagnosis and self.diagnosis.strip())


def validate_status(status: str) -> None:
    if status not in RepairStatus.all():
        raise LifecycleError(
            f"Invalid repair status '{status}'. Must be one of: {', '.join(RepairStatus.all())}"
        )


def is_terminal(status: str) -> bool:
    return status in RepairStatus.terminal()


def next_status(current: str, event: str, snapshot: TicketSnapshot | None = None) -> str:
    """
    Compute the status a ticket moves to.

    Args:
        current: The ticket's status before the event
        event: One of RepairEvent
        snapshot: Draft diagnosis / line count (only used by SAVE)

    Returns:
        The next status (may equal current for SAVE)

    Raises:
        LifecycleError: If the event is unknown or not allowed from current
    """
    validate_status(current)

    if event == RepairEvent.SAVE:
        snapshot = snapshot or TicketSnapshot()
        if current == RepairStatus.RECEIVED and snapshot.has_diagnosis:
            return RepairStatus.CHECKING
        if current == RepairStatus.CHECKING and snapshot.line_count > 0:
            return RepairStatus.QUOTING
        return current

    if event == RepairEvent.CANCEL:
        if is_terminal(current):
            raise LifecycleError(f"Cannot cancel a ticket in terminal status '{current}'")
        return RepairStatus.CANCELLED

    if event not in EXPLICIT_TRANSITIONS:
        raise LifecycleError(f"Unknown repair event '{event}'")

    required, target = EXPLICIT_TRANSITIONS[event]
    if current != required:
        raise LifecycleError(
            f"Cannot {EVENT_LABELS[event].lower()} from '{current}': ticket must be '{required}'"
        )
    return target


def required_permission(current: str, target: str) -> str:
    """Permission code needed to move from current to target."""
    if current == target:
        return SAVE_PERMISSION
    if target == RepairStatus.CANCELLED:
        return CANCEL_PERMISSION
    try:
        return TRANSITION_PERMISSIONS[(current, target)]
    except KeyError:
        raise LifecycleError(f"No transition from '{current}' to '{target}'")


def available_events(current: str) -> list[str]:
    """Explicit events that are valid from current (role not considered)."""
    validate_status(current)
    events = [
        event for event, (required, _) in EXPLICIT_TRANSITIONS.items()
        if required == current
    ]
    if not is_terminal(current):
        events.append(RepairEvent.CANCEL)
    return events
