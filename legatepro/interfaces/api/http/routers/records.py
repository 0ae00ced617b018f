"""
===============================================================================
CRC CARD — routers/records.py
===============================================================================

Responsibilities:
    - Mount the estate-scoped JSON routes of properties, documents, tasks and
      notes (see scoped.build_scoped_router).

Collaborators:
    - container: use-case factories
    - schemas.records: request/response DTOs
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from legatepro.container import (
    get_document_use_cases,
    get_note_use_cases,
    get_property_use_cases,
    get_task_use_cases,
)

from ..schemas.records import (
    DocumentReq,
    DocumentRes,
    NoteReq,
    NoteRes,
    PropertyReq,
    PropertyRes,
    TaskReq,
    TaskRes,
)
from .scoped import build_scoped_router

router = APIRouter()

router.include_router(
    build_scoped_router(
        segment="properties",
        singular="property",
        plural="properties",
        request_model=PropertyReq,
        response_model=PropertyRes,
        use_cases_factory=get_property_use_cases,
        tag="properties",
    )
)
router.include_router(
    build_scoped_router(
        segment="documents",
        singular="document",
        plural="documents",
        request_model=DocumentReq,
        response_model=DocumentRes,
        use_cases_factory=get_document_use_cases,
        tag="documents",
    )
)
router.include_router(
    build_scoped_router(
        segment="tasks",
        singular="task",
        plural="tasks",
        request_model=TaskReq,
        response_model=TaskRes,
        use_cases_factory=get_task_use_cases,
        tag="tasks",
    )
)
router.include_router(
    build_scoped_router(
        segment="notes",
        singular="note",
        plural="notes",
        request_model=NoteReq,
        response_model=NoteRes,
        use_cases_factory=get_note_use_cases,
        tag="notes",
    )
)
