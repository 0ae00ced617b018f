"""
===============================================================================
CRC CARD — routers/scoped.py
===============================================================================

Responsibilities:
    - Build the five JSON routes of an estate-scoped resource:
        GET    /estates/{estateId}/<segment>
        POST   /estates/{estateId}/<segment>
        GET    /estates/{estateId}/<segment>/{recordId}
        PATCH  /estates/{estateId}/<segment>/{recordId}
        DELETE /estates/{estateId}/<segment>/{recordId}
    - Wrap results in the resource's envelope ({task: ...}, {tasks: [...]}).

Notes:
    - No `from __future__ import annotations` here: FastAPI reads the request
      model from the closures' annotations at runtime.
===============================================================================
"""

from typing import Callable, Optional

from fastapi import APIRouter, Depends

from legatepro.application.usecases import EstateScopedUseCases

from ..dependencies import optional_user_id
from ..error_mapping import unwrap
from ..schemas import CamelModel, DeletedRes, RequestModel


def build_scoped_router(
    *,
    segment: str,
    singular: str,
    plural: str,
    request_model: type[RequestModel],
    response_model: type[CamelModel],
    use_cases_factory: Callable[[], EstateScopedUseCases],
    tag: str,
) -> APIRouter:
    router = APIRouter(tags=[tag])
    collection_path = f"/estates/{{estate_id}}/{segment}"
    item_path = f"{collection_path}/{{record_id}}"

    def one(entity) -> dict:
        return {singular: response_model.model_validate(entity)}

    @router.get(collection_path, name=f"list_{plural}")
    def list_records(
        estate_id: str,
        user_id: Optional[str] = Depends(optional_user_id),
        use_cases: EstateScopedUseCases = Depends(use_cases_factory),
    ):
        records = unwrap(use_cases.list(estate_id, user_id))
        return {plural: [response_model.model_validate(r) for r in records]}

    @router.post(collection_path, status_code=201, name=f"create_{singular}")
    def create_record(
        estate_id: str,
        req: request_model,
        user_id: Optional[str] = Depends(optional_user_id),
        use_cases: EstateScopedUseCases = Depends(use_cases_factory),
    ):
        return one(unwrap(use_cases.create(estate_id, user_id, req.to_input())))

    @router.get(item_path, name=f"get_{singular}")
    def get_record(
        estate_id: str,
        record_id: str,
        user_id: Optional[str] = Depends(optional_user_id),
        use_cases: EstateScopedUseCases = Depends(use_cases_factory),
    ):
        return one(unwrap(use_cases.get(estate_id, record_id, user_id)))

    @router.patch(item_path, name=f"update_{singular}")
    def update_record(
        estate_id: str,
        record_id: str,
        req: request_model,
        user_id: Optional[str] = Depends(optional_user_id),
        use_cases: EstateScopedUseCases = Depends(use_cases_factory),
    ):
        return one(
            unwrap(use_cases.update(estate_id, record_id, user_id, req.to_input()))
        )

    @router.delete(item_path, response_model=DeletedRes, name=f"delete_{singular}")
    def delete_record(
        estate_id: str,
        record_id: str,
        user_id: Optional[str] = Depends(optional_user_id),
        use_cases: EstateScopedUseCases = Depends(use_cases_factory),
    ):
        deleted = unwrap(use_cases.delete(estate_id, record_id, user_id))
        return DeletedRes(id=deleted.id)

    return router
