from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from shopdesk.time_utils import to_utc_z


@dataclass(frozen=True)
class DebtEvent:
    """
    Append-only journal entry for one change to a party balance.

    occurred_at is business time; balance_after is the balance once the
    (floored) delta was applied.
    """
    id: str
    party_kind: str
    party_id: str
    record_id: str
    delta: int
    balance_after: int
    occurred_at: datetime
    actor_id: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "party_kind": self.party_kind,
            "party_id": self.party_id,
            "record_id": self.record_id,
            "delta": self.delta,
            "balance_after": self.balance_after,
            "occurred_at": to_utc_z(self.occurred_at),
            "actor_id": self.actor_id,
        }
