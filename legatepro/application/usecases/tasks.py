"""
===============================================================================
USE CASES: Estate tasks
===============================================================================

The administration checklist. Moving a task to DONE stamps completedAt and is
reported as TASK_COMPLETED instead of TASK_UPDATED.
===============================================================================
"""

from __future__ import annotations

from typing import Any, Mapping

from ...domain.entities import EstateEventType, EstateTask, TaskStatus
from .. import inputs
from .base import EstateScopedUseCases, parse_fields

_PARSERS = {
    "title": lambda d: inputs.text(d, "title"),
    "description": lambda d: inputs.text(d, "description"),
    "status": lambda d: inputs.choice(
        d,
        "status",
        TaskStatus,
        code="invalid_status",
        message="Invalid task status",
        default=TaskStatus.NOT_STARTED,
        upper=True,
    ),
    "due_date": lambda d: inputs.date_field(
        d, "due_date", invalid=("invalid_date", "dueDate must be a valid date")
    ),
    "related_document_id": lambda d: inputs.text(d, "related_document_id"),
    "related_invoice_id": lambda d: inputs.text(d, "related_invoice_id"),
}


class TaskUseCases(EstateScopedUseCases[EstateTask]):
    resource = "Task"
    segment = "tasks"
    entity_cls = EstateTask

    created_event = EstateEventType.TASK_CREATED
    updated_event = EstateEventType.TASK_UPDATED
    deleted_event = EstateEventType.TASK_DELETED

    def _parse(self, data: Mapping[str, Any], *, partial: bool) -> dict[str, Any]:
        return parse_fields(data, _PARSERS, partial=partial)

    def _describe(self, entity: EstateTask) -> str:
        return entity.title

    def _event_for_update(
        self, before: EstateTask, after: EstateTask
    ) -> EstateEventType | None:
        if after.status == TaskStatus.DONE and before.status != TaskStatus.DONE:
            return EstateEventType.TASK_COMPLETED
        return EstateEventType.TASK_UPDATED
