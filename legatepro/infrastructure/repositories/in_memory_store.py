"""
============================================================
CRC CARD — infrastructure/repositories/in_memory_store.py
============================================================
Class: InMemoryRecordStore

Responsibilities:
  - Implement RecordStore in process memory (tests, local development).
  - Mirror the Postgres store semantics: equality filters on top-level keys,
    deterministic ordering (insertion order), unique ids per collection.
  - Isolate callers from internal state (deep copies in and out).

Collaborators:
  - domain.repositories.RecordStore (port)
  - crosscutting.exceptions.DatabaseError

Constraints / Notes:
  - Thread-safe with a single Lock.
  - State lives only for the life of the process.
============================================================
"""

from __future__ import annotations

from copy import deepcopy
from threading import Lock
from typing import Any, Mapping

from ...crosscutting.exceptions import DatabaseError


def _matches(record: Mapping[str, Any], where: Mapping[str, Any] | None) -> bool:
    if not where:
        return True
    return all(record.get(key) == value for key, value in where.items())


class InMemoryRecordStore:
    def __init__(self) -> None:
        self._lock = Lock()
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    def _table(self, collection: str) -> dict[str, dict[str, Any]]:
        return self._collections.setdefault(collection, {})

    def find(
        self, collection: str, where: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        with self._lock:
            return [
                deepcopy(record)
                for record in self._table(collection).values()
                if _matches(record, where)
            ]

    def find_one(
        self, collection: str, where: Mapping[str, Any]
    ) -> dict[str, Any] | None:
        with self._lock:
            for record in self._table(collection).values():
                if _matches(record, where):
                    return deepcopy(record)
        return None

    def create(self, collection: str, record: dict[str, Any]) -> dict[str, Any]:
        record_id = record.get("id")
        if not record_id:
            raise DatabaseError(f"{collection}: record without id")
        with self._lock:
            table = self._table(collection)
            if record_id in table:
                raise DatabaseError(f"{collection}: duplicate id {record_id}")
            table[record_id] = deepcopy(record)
            return deepcopy(record)

    def update(
        self, collection: str, record_id: str, record: dict[str, Any]
    ) -> dict[str, Any] | None:
        with self._lock:
            table = self._table(collection)
            if record_id not in table:
                return None
            table[record_id] = deepcopy({**record, "id": record_id})
            return deepcopy(table[record_id])

    def delete(self, collection: str, where: Mapping[str, Any]) -> int:
        with self._lock:
            table = self._table(collection)
            doomed = [rid for rid, rec in table.items() if _matches(rec, where)]
            for rid in doomed:
                del table[rid]
            return len(doomed)

    def count(self, collection: str) -> int:
        with self._lock:
            return len(self._table(collection))

    def ping(self) -> bool:
        return True
