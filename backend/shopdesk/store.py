# Overview: Explicit in-memory state for one running shop application.

"""
ShopStore owns every collection for the lifetime of one application
instance. It is built from an injected ShopState (seed data in production,
fixtures in tests) and discarded with the app; nothing is persisted.

Services receive the store explicitly and publish changes with commit(),
which swaps in the new copy-on-write collection.
"""

from __future__ import annotations

from dataclasses import dataclass

from .services.record_store import RecordCollection


COLLECTION_NAMES = (
    "employees",
    "products",
    "customers",
    "suppliers",
    "invoices",
    "purchase_orders",
    "vat_invoices",
    "debt_events",
)


@dataclass(frozen=True)
class ShopState:
    """Initial contents of a ShopStore, one tuple per collection."""
    employees: tuple = ()
    products: tuple = ()
    customers: tuple = ()
    suppliers: tuple = ()
    invoices: tuple = ()
    purchase_orders: tuple = ()
    vat_invoices: tuple = ()
    debt_events: tuple = ()


class ShopStore:
    def __init__(self, initial_state: ShopState | None = None):
        state = initial_state or ShopState()
        for name in COLLECTION_NAMES:
            setattr(self, name, RecordCollection(name, getattr(state, name)))
        # token hash -> SessionContext, managed by session_service
        self.sessions: dict = {}
        # prefix -> last number issued, managed by identifier_service
        self.sequences: dict[str, int] = {}

    def collection(self, name: str) -> RecordCollection:
        if name not in COLLECTION_NAMES:
            raise KeyError(f"Unknown collection '{name}'")
        return getattr(self, name)

    def commit(self, collection: RecordCollection) -> None:
        """Publish a new version of one collection."""
        if collection.name not in COLLECTION_NAMES:
            raise KeyError(f"Unknown collection '{collection.name}'")
        setattr(self, collection.name, collection)

    def id_in_use(self, record_id: str) -> bool:
        """True when any collection already holds a record with this id."""
        return any(getattr(self, name).find(record_id) is not None for name in COLLECTION_NAMES)

    def snapshot(self) -> ShopState:
        return ShopState(**{name: tuple(getattr(self, name)) for name in COLLECTION_NAMES})
