"""
===============================================================================
CRC CARD — domain/readiness.py
===============================================================================

Module:
    Estate readiness score

Responsibilities:
    - Turn raw estate counts into a 0..100 readiness score.
    - Report per-category points and the "missing" / "at risk" signals that
      explain lost points.

Collaborators:
    - application/usecases/readiness.py: gathers the inputs, caches the result.

Scoring:
    documents  35  LEGAL, BANKING and PROPERTY subjects indexed (pro rata)
    tasks      30  completion ratio, -5 with any overdue task, -10 with 3+
    properties 15  at least one property recorded
    finances   20  at least one invoice or rent payment recorded

Notes:
    - Pure and deterministic: `today` is an input.
    - Signals describe state only; they drive no control flow.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Literal

from .entities import EstateDocument, EstateTask, TaskStatus

REQUIRED_DOCUMENT_SUBJECTS: tuple[str, ...] = ("LEGAL", "BANKING", "PROPERTY")

MAX_POINTS: dict[str, int] = {
    "documents": 35,
    "tasks": 30,
    "properties": 15,
    "finances": 20,
}

Severity = Literal["low", "medium", "high"]


@dataclass(frozen=True, slots=True)
class ReadinessSignal:
    key: str
    label: str
    kind: Literal["missing", "at_risk"]
    severity: Severity


@dataclass(frozen=True, slots=True)
class ReadinessReport:
    score: int
    breakdown: dict[str, int]
    counts: dict[str, int]
    signals: list[ReadinessSignal] = field(default_factory=list)

    @property
    def missing(self) -> list[ReadinessSignal]:
        return [s for s in self.signals if s.kind == "missing"]

    @property
    def at_risk(self) -> list[ReadinessSignal]:
        return [s for s in self.signals if s.kind == "at_risk"]


def _score_documents(
    documents: list[EstateDocument], signals: list[ReadinessSignal]
) -> int:
    subjects = {doc.subject for doc in documents}
    present = [s for s in REQUIRED_DOCUMENT_SUBJECTS if s in subjects]
    for subject in REQUIRED_DOCUMENT_SUBJECTS:
        if subject not in subjects:
            signals.append(
                ReadinessSignal(
                    key=f"documents:{subject.lower()}",
                    label=f"No {subject.lower()} documents indexed",
                    kind="missing",
                    severity="high" if subject == "LEGAL" else "medium",
                )
            )
    return round(MAX_POINTS["documents"] * len(present) / len(REQUIRED_DOCUMENT_SUBJECTS))


def _score_tasks(
    tasks: list[EstateTask], today: date, signals: list[ReadinessSignal]
) -> int:
    if not tasks:
        signals.append(
            ReadinessSignal(
                key="tasks:none",
                label="No tasks created yet",
                kind="missing",
                severity="medium",
            )
        )
        return 0

    done = sum(1 for t in tasks if t.status == TaskStatus.DONE)
    overdue = sum(1 for t in tasks if t.is_overdue(today))
    points = round(MAX_POINTS["tasks"] * done / len(tasks))

    if overdue:
        points -= 10 if overdue >= 3 else 5
        signals.append(
            ReadinessSignal(
                key="tasks:overdue",
                label=f"{overdue} overdue task{'s' if overdue != 1 else ''}",
                kind="at_risk",
                severity="high" if overdue >= 3 else "medium",
            )
        )
    return max(points, 0)


def compute_readiness(
    *,
    documents: Iterable[EstateDocument],
    tasks: Iterable[EstateTask],
    property_count: int,
    invoice_count: int,
    rent_payment_count: int,
    today: date,
) -> ReadinessReport:
    docs = list(documents)
    task_list = list(tasks)
    signals: list[ReadinessSignal] = []

    breakdown = {
        "documents": _score_documents(docs, signals),
        "tasks": _score_tasks(task_list, today, signals),
        "properties": MAX_POINTS["properties"] if property_count > 0 else 0,
        "finances": (
            MAX_POINTS["finances"] if invoice_count + rent_payment_count > 0 else 0
        ),
    }
    if property_count == 0:
        signals.append(
            ReadinessSignal(
                key="properties:none",
                label="No properties recorded",
                kind="missing",
                severity="low",
            )
        )
    if invoice_count + rent_payment_count == 0:
        signals.append(
            ReadinessSignal(
                key="finances:none",
                label="No invoices or rent payments recorded",
                kind="missing",
                severity="high",
            )
        )

    counts = {
        "documents": len(docs),
        "tasks": len(task_list),
        "tasksDone": sum(1 for t in task_list if t.status == TaskStatus.DONE),
        "tasksOverdue": sum(1 for t in task_list if t.is_overdue(today)),
        "properties": property_count,
        "invoices": invoice_count,
        "rentPayments": rent_payment_count,
    }
    return ReadinessReport(
        score=min(sum(breakdown.values()), 100),
        breakdown=breakdown,
        counts=counts,
        signals=signals,
    )
