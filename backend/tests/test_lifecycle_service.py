"""
Repair state machine tests (pure, no store).
"""

import pytest

from shopdesk.models import RepairStatus
from shopdesk.services.lifecycle_service import (
    CANCEL_PERMISSION, SAVE_PERMISSION, LifecycleError, RepairEvent, TicketSnapshot,
    available_events, next_status, required_permission,
)


class TestImplicitEscalation:

    def test_diagnosis_moves_received_to_checking(self):
        assert next_status(RepairStatus.RECEIVED, RepairEvent.SAVE, TicketSnapshot("Hỏng main")) == RepairStatus.CHECKING

    def test_diagnosis_checked_before_line_items(self):
        """Diagnosis and a first line item in one save land on CHECKING, not QUOTING."""
        snapshot = TicketSnapshot(diagnosis="x", line_count=1)
        assert next_status(RepairStatus.RECEIVED, RepairEvent.SAVE, snapshot) == RepairStatus.CHECKING

    def test_line_item_moves_checking_to_quoting(self):
        assert next_status(RepairStatus.CHECKING, RepairEvent.SAVE, TicketSnapshot("x", 1)) == RepairStatus.QUOTING

    def test_blank_diagnosis_does_not_escalate(self):
        assert next_status(RepairStatus.RECEIVED, RepairEvent.SAVE, TicketSnapshot("   ")) == RepairStatus.RECEIVED

    def test_lines_alone_do_not_escalate_received(self):
        assert next_status(RepairStatus.RECEIVED, RepairEvent.SAVE, TicketSnapshot("", 3)) == RepairStatus.RECEIVED

    @pytest.mark.parametrize("status", [
        RepairStatus.QUOTING, RepairStatus.WAITING_PARTS, RepairStatus.IN_PROGRESS,
        RepairStatus.COMPLETED, RepairStatus.DELIVERED, RepairStatus.CANCELLED,
    ])
    def test_save_elsewhere_keeps_status(self, status):
        assert next_status(status, RepairEvent.SAVE, TicketSnapshot("x", 2)) == status

    def test_save_without_snapshot(self):
        assert next_status(RepairStatus.CHECKING, RepairEvent.SAVE) == RepairStatus.CHECKING


class TestExplicitEvents:

    @pytest.mark.parametrize("event,source,target", [
        (RepairEvent.SEND_QUOTE, RepairStatus.CHECKING, RepairStatus.QUOTING),
        (RepairEvent.APPROVE_QUOTE, RepairStatus.QUOTING, RepairStatus.IN_PROGRESS),
        (RepairEvent.MARK_FINISHED, RepairStatus.IN_PROGRESS, RepairStatus.COMPLETED),
        (RepairEvent.DELIVER, RepairStatus.COMPLETED, RepairStatus.DELIVERED),
    ])
    def test_happy_path(self, event, source, target):
        assert next_status(source, event) == target

    def test_wrong_source_status(self):
        with pytest.raises(LifecycleError):
            next_status(RepairStatus.RECEIVED, RepairEvent.DELIVER)

    def test_unknown_event(self):
        with pytest.raises(LifecycleError):
            next_status(RepairStatus.RECEIVED, "TELEPORT")

    def test_unknown_status(self):
        with pytest.raises(LifecycleError):
            next_status("LOST", RepairEvent.SAVE)

    def test_cancel_from_waiting_parts(self):
        assert next_status(RepairStatus.WAITING_PARTS, RepairEvent.CANCEL) == RepairStatus.CANCELLED

    @pytest.mark.parametrize("status", [RepairStatus.DELIVERED, RepairStatus.CANCELLED])
    def test_cannot_cancel_terminal(self, status):
        with pytest.raises(LifecycleError):
            next_status(status, RepairEvent.CANCEL)


class TestPermissions:

    def test_same_status_is_a_save(self):
        assert required_permission(RepairStatus.QUOTING, RepairStatus.QUOTING) == SAVE_PERMISSION

    def test_cancel(self):
        assert required_permission(RepairStatus.IN_PROGRESS, RepairStatus.CANCELLED) == CANCEL_PERMISSION

    def test_diagnosis(self):
        assert required_permission(RepairStatus.RECEIVED, RepairStatus.CHECKING) == "DIAGNOSE_REPAIR"

    def test_no_transition(self):
        with pytest.raises(LifecycleError):
            required_permission(RepairStatus.RECEIVED, RepairStatus.DELIVERED)


class TestAvailableEvents:

    def test_completed(self):
        assert available_events(RepairStatus.COMPLETED) == [RepairEvent.DELIVER, RepairEvent.CANCEL]

    def test_waiting_parts_only_cancels(self):
        assert available_events(RepairStatus.WAITING_PARTS) == [RepairEvent.CANCEL]

    def test_terminal_has_none(self):
        assert available_events(RepairStatus.DELIVERED) == []
