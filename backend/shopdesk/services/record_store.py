# Overview: Copy-on-write record collections keyed by id.

"""
Record Store

Every entity collection (invoices, repair tickets, purchase orders, VAT
invoices, parties, products, employees) is a RecordCollection: an immutable,
ordered sequence of frozen records with an `id` attribute.

INVARIANTS:
- Operations never mutate the receiver; they return a new collection.
  Holders of the previous collection keep seeing the previous records.
- insert() prepends. Ids are caller-generated; uniqueness is NOT checked,
  so a duplicate id is a caller bug, not a store error.
- Operating on an id that is absent raises RecordNotFoundError; the caller
  decides whether that is fatal.
"""

from __future__ import annotations

import dataclasses
from typing import Callable, Generic, Iterable, Iterator, TypeVar


R = TypeVar("R")


class RecordNotFoundError(LookupError):
    """Raised when a record id is absent from a collection."""

    def __init__(self, collection: str, record_id: str):
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"{collection} record '{record_id}' not found")


class RecordCollection(Generic[R]):
    """Immutable ordered collection of frozen records."""

    __slots__ = ("name", "_records")

    def __init__(self, name: str, records: Iterable[R] = ()):
        self.name = name
        self._records: tuple[R, ...] = tuple(records)

    def __iter__(self) -> Iterator[R]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"RecordCollection({self.name!r}, {len(self._records)} records)"

    def all(self) -> list[R]:
        return list(self._records)

    def find(self, record_id: str) -> R | None:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def get(self, record_id: str) -> R:
        record = self.find(record_id)
        if record is None:
            raise RecordNotFoundError(self.name, record_id)
        return record

    def filter(self, predicate: Callable[[R], bool]) -> list[R]:
        return [record for record in self._records if predicate(record)]

    def insert(self, record: R) -> RecordCollection[R]:
        return RecordCollection(self.name, (record, *self._records))

    def append(self, record: R) -> RecordCollection[R]:
        return RecordCollection(self.name, (*self._records, record))

    def replace_by_id(self, record_id: str, record: R) -> RecordCollection[R]:
        if self.find(record_id) is None:
            raise RecordNotFoundError(self.name, record_id)
        return RecordCollection(
            self.name,
            (record if existing.id == record_id else existing for existing in self._records),
        )

    def patch_by_id(self, record_id: str, **changes) -> tuple[RecordCollection[R], R]:
        """
        Apply field changes to one record.

        Returns:
            (new collection, updated record)

        Raises:
            RecordNotFoundError: If no record has record_id
            TypeError: If changes name a field the record type does not have
        """
        current = self.get(record_id)
        updated = dataclasses.replace(current, **changes)
        return self.replace_by_id(record_id, updated), updated

    def remove_by_id(self, record_id: str) -> RecordCollection[R]:
        if self.find(record_id) is None:
            raise RecordNotFoundError(self.name, record_id)
        return RecordCollection(self.name, (r for r in self._records if r.id != record_id))
