"""
============================================================
CRC CARD — infrastructure/db/errors.py
============================================================
Lifecycle errors of the record store pool. They signal wiring mistakes
(startup order), not database failures, which surface as DatabaseError.
============================================================
"""


class DatabasePoolError(Exception):
    """Base class for pool lifecycle errors."""


class PoolAlreadyInitializedError(DatabasePoolError):
    """The pool was opened a second time in one process."""


class PoolNotInitializedError(DatabasePoolError):
    """The record store asked for the pool before startup opened it."""
