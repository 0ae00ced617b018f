"""
============================================================
CRC CARD — infrastructure/repositories/postgres_store.py
============================================================
Class: PostgresRecordStore

Responsibilities:
  - Implement RecordStore on PostgreSQL with one JSONB `records` table.
  - Translate equality filters to JSONB containment (`data @> filter`).
  - Keep estate_id in its own column so estate-scoped scans use an index.
  - Wrap driver failures in DatabaseError (logged with context).

Collaborators:
  - psycopg_pool.ConnectionPool (infrastructure.db.pool)
  - psycopg.types.json.Jsonb
  - crosscutting.exceptions.DatabaseError, crosscutting.logger
  - Table: records(collection, id, estate_id, data, created_at, updated_at)
    (alembic/versions/001_records.py)

Constraints / Notes:
  - Every query is parameterized.
  - Ordering is deterministic: created_at ASC, id ASC (insertion order).
  - Last write wins; there is no version column.
============================================================
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

import psycopg
from psycopg.types.json import Jsonb
from psycopg_pool import ConnectionPool

from ...crosscutting.exceptions import DatabaseError
from ...crosscutting.logger import logger


class PostgresRecordStore:
    _SQL_FIND = """
        SELECT data
        FROM records
        WHERE collection = %s AND data @> %s
        ORDER BY created_at ASC, id ASC
    """

    _SQL_FIND_ONE = """
        SELECT data
        FROM records
        WHERE collection = %s AND data @> %s
        ORDER BY created_at ASC, id ASC
        LIMIT 1
    """

    _SQL_INSERT = """
        INSERT INTO records (collection, id, estate_id, data)
        VALUES (%s, %s, %s, %s)
        RETURNING data
    """

    _SQL_UPDATE = """
        UPDATE records
        SET data = %s, estate_id = %s, updated_at = now()
        WHERE collection = %s AND id = %s
        RETURNING data
    """

    _SQL_DELETE = "DELETE FROM records WHERE collection = %s AND data @> %s"

    def __init__(self, pool: Optional[ConnectionPool] = None):
        # Injectable pool for tests; production uses the process-wide pool.
        self._pool = pool

    # =========================================================
    # Helpers
    # =========================================================
    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool
        from ..db.pool import get_pool

        return get_pool()

    def _execute(
        self,
        *,
        query: str,
        params: Iterable[object],
        context_msg: str,
        extra: dict,
        fetch: str,
    ) -> Any:
        try:
            with self._get_pool().connection() as conn:
                cursor = conn.execute(query, tuple(params))
                if fetch == "all":
                    return cursor.fetchall()
                if fetch == "one":
                    return cursor.fetchone()
                return cursor.rowcount
        except psycopg.Error as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}", original_error=exc) from exc

    # =========================================================
    # RecordStore
    # =========================================================
    def find(
        self, collection: str, where: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        rows = self._execute(
            query=self._SQL_FIND,
            params=[collection, Jsonb(dict(where or {}))],
            context_msg="PostgresRecordStore: find failed",
            extra={"collection": collection},
            fetch="all",
        )
        return [row[0] for row in rows]

    def find_one(
        self, collection: str, where: Mapping[str, Any]
    ) -> dict[str, Any] | None:
        row = self._execute(
            query=self._SQL_FIND_ONE,
            params=[collection, Jsonb(dict(where))],
            context_msg="PostgresRecordStore: find_one failed",
            extra={"collection": collection},
            fetch="one",
        )
        return row[0] if row else None

    def create(self, collection: str, record: dict[str, Any]) -> dict[str, Any]:
        row = self._execute(
            query=self._SQL_INSERT,
            params=[collection, record["id"], record.get("estate_id"), Jsonb(record)],
            context_msg="PostgresRecordStore: insert failed",
            extra={"collection": collection, "record_id": record.get("id")},
            fetch="one",
        )
        return row[0]

    def update(
        self, collection: str, record_id: str, record: dict[str, Any]
    ) -> dict[str, Any] | None:
        payload = {**record, "id": record_id}
        row = self._execute(
            query=self._SQL_UPDATE,
            params=[Jsonb(payload), payload.get("estate_id"), collection, record_id],
            context_msg="PostgresRecordStore: update failed",
            extra={"collection": collection, "record_id": record_id},
            fetch="one",
        )
        return row[0] if row else None

    def delete(self, collection: str, where: Mapping[str, Any]) -> int:
        return self._execute(
            query=self._SQL_DELETE,
            params=[collection, Jsonb(dict(where))],
            context_msg="PostgresRecordStore: delete failed",
            extra={"collection": collection},
            fetch="none",
        )

    def ping(self) -> bool:
        """True if a pooled connection answers SELECT 1."""
        row = self._execute(
            query="SELECT 1",
            params=[],
            context_msg="PostgresRecordStore: ping failed",
            extra={},
            fetch="one",
        )
        return bool(row) and row[0] == 1
