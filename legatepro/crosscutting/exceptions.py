"""
===============================================================================
MODULE: Typed internal exceptions
===============================================================================

Goal
----
Internal exceptions with:
- a stable error_code
- an error_id to correlate responses with logs
- a human message that never carries secrets

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Component:
  LegateProError + subclasses

Responsibilities:
  - Standardize unexpected failures that are later mapped to HTTP 500
  - Generate error_id for tracing

Collaborators:
  - api/exception_handlers.py (maps to AppHTTPException)
  - infrastructure/repositories/postgres_store.py (raises DatabaseError)

Notes:
  - Validation and authorization outcomes are NOT exceptions; they travel as
    tagged results (application/results.py).
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class LegateProError(Exception):
    """Base for internal errors: error_code + error_id + message."""

    error_code: str = "LEGATEPRO_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class DatabaseError(LegateProError):
    """Record store failures (connection, query, timeout, pool)."""

    error_code: str = "DATABASE_ERROR"


class CacheError(LegateProError):
    """Page cache backend failures."""

    error_code: str = "CACHE_ERROR"
