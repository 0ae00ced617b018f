"""
===============================================================================
CRC CARD — schemas/common.py
===============================================================================

Module:
    Shared HTTP schema base

Responsibilities:
    - CamelModel: camelCase on the wire, snake_case in Python.
    - Build responses straight from domain dataclasses (from_attributes).

Notes:
    - Request models type non-text fields as Any: the application inputs
      layer parses them, so JSON and form submissions fail with the same
      validation codes and messages.
    - Request models are dumped with exclude_unset=True, so partial updates
      only carry the fields the client sent.
===============================================================================
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class RequestModel(CamelModel):
    def to_input(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class DeletedRes(CamelModel):
    id: str
