"""
============================================================
CRC CARD — infrastructure/db/pool.py
============================================================
Component: PostgreSQL connection pool for the record store

Responsibilities:
  - Hold the one psycopg pool of the process (API worker or CLI run).
  - Tag connections (application_name) and bound every statement
    (statement_timeout) as they join the pool.
  - Health-check connections on checkout, so a restarted database does not
    surface as a failed estate mutation.

Collaborators:
  - psycopg_pool.ConnectionPool
  - crosscutting.config (DB_STATEMENT_TIMEOUT_MS)
  - infrastructure.repositories.postgres_store (get_pool)

Notes:
  - init twice and use-before-init raise typed errors (db/errors.py).
============================================================
"""

from __future__ import annotations

import threading

from psycopg_pool import ConnectionPool

from ...crosscutting.logger import logger
from .errors import PoolAlreadyInitializedError, PoolNotInitializedError

APPLICATION_NAME = "legatepro"

_lock = threading.Lock()
_pool: ConnectionPool | None = None


def _prepare_connection(conn) -> None:
    from ...crosscutting.config import get_settings

    timeout_ms = get_settings().db_statement_timeout_ms
    conn.execute(
        "SELECT set_config('application_name', %s, false)", (APPLICATION_NAME,)
    )
    if timeout_ms > 0:
        conn.execute(
            "SELECT set_config('statement_timeout', %s, false)", (f"{timeout_ms}ms",)
        )
    conn.commit()


def init_pool(database_url: str, min_size: int, max_size: int) -> ConnectionPool:
    global _pool

    with _lock:
        if _pool is not None:
            raise PoolAlreadyInitializedError("Record store pool is already open")
        _pool = ConnectionPool(
            conninfo=database_url,
            min_size=min_size,
            max_size=max_size,
            configure=_prepare_connection,
            check=ConnectionPool.check_connection,
            name=APPLICATION_NAME,
            open=True,
        )
        logger.info(
            "record store pool opened",
            extra={"min_size": min_size, "max_size": max_size},
        )
        return _pool


def get_pool() -> ConnectionPool:
    pool = _pool
    if pool is None:
        raise PoolNotInitializedError(
            "Record store pool is not open; call init_pool() at startup"
        )
    return pool


def close_pool() -> None:
    """Close and forget the pool; a no-op when none is open."""
    global _pool

    with _lock:
        pool, _pool = _pool, None
    if pool is None:
        return
    pool.close()
    logger.info("record store pool closed")
