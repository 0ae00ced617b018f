"""
===============================================================================
USE CASE: Estate readiness
===============================================================================

Computes the deterministic readiness score of an estate (documents, tasks,
properties, finances) for the estate overview page.

Caching:
  - The result is cached under the estate overview path, which every guarded
    mutation of the estate invalidates.
  - Cache failures are logged; the score is then computed fresh.
===============================================================================
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

from ...crosscutting.exceptions import CacheError
from ...crosscutting.logger import logger
from ...domain.access import EstateAccess
from ...domain.readiness import ReadinessReport, ReadinessSignal, compute_readiness
from ...domain.repositories import (
    DocumentRepository,
    InvoiceRepository,
    PropertyRepository,
    RentPaymentRepository,
    TaskRepository,
)
from ...domain.services import PageCache
from ..guards import EstateMutationGuard
from ..paths import estate_path
from ..results import Ok, Outcome


def _signal(signal: ReadinessSignal) -> dict[str, str]:
    return {"key": signal.key, "label": signal.label, "severity": signal.severity}


def readiness_payload(estate_id: str, report: ReadinessReport) -> dict[str, Any]:
    return {
        "estateId": estate_id,
        "score": report.score,
        "breakdown": dict(report.breakdown),
        "counts": dict(report.counts),
        "missing": [_signal(s) for s in report.missing],
        "atRisk": [_signal(s) for s in report.at_risk],
        "generatedAt": datetime.now(timezone.utc).isoformat(),
    }


class GetEstateReadinessUseCase:
    def __init__(
        self,
        guard: EstateMutationGuard,
        page_cache: PageCache,
        *,
        documents: DocumentRepository,
        tasks: TaskRepository,
        properties: PropertyRepository,
        invoices: InvoiceRepository,
        rent_payments: RentPaymentRepository,
    ) -> None:
        self._guard = guard
        self._cache = page_cache
        self._documents = documents
        self._tasks = tasks
        self._properties = properties
        self._invoices = invoices
        self._rent_payments = rent_payments

    def _cached(self, path: str) -> dict[str, Any] | None:
        try:
            return self._cache.get(path)
        except CacheError as exc:
            logger.warning("page cache read failed", extra={"path": path, "error": exc.message})
            return None

    def _store(self, path: str, payload: dict[str, Any]) -> None:
        try:
            self._cache.set(path, payload)
        except CacheError as exc:
            logger.warning("page cache write failed", extra={"path": path, "error": exc.message})

    def execute(
        self, estate_id: str, user_id: str | None, *, today: date | None = None
    ) -> Outcome[dict[str, Any]]:
        access = self._guard.authorize_read(estate_id, user_id)
        if not isinstance(access, EstateAccess):
            return access

        path = estate_path(estate_id)
        if today is None:
            cached = self._cached(path)
            if cached is not None:
                return Ok(cached)

        report = compute_readiness(
            documents=self._documents.list_for_estate(estate_id),
            tasks=self._tasks.list_for_estate(estate_id),
            property_count=len(self._properties.list_for_estate(estate_id)),
            invoice_count=len(self._invoices.list_for_estate(estate_id)),
            rent_payment_count=len(self._rent_payments.list_for_estate(estate_id)),
            today=today or date.today(),
        )
        payload = readiness_payload(estate_id, report)
        if today is None:
            self._store(path, payload)
        return Ok(payload)
