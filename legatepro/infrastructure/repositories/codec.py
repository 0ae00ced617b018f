"""
Name: Record Codec

Responsibilities:
  - Convert domain dataclasses to JSON-compatible dicts and back
  - Reuse pydantic TypeAdapters (one per class) for dates, enums and nested
    line items

Collaborators:
  - infrastructure.repositories.records: every typed repository
  - domain.entities / domain.invoices / identity.users

Notes:
  - Loading re-runs the entity constructors' checks (__post_init__), so a
    corrupt row fails loudly instead of leaking into use cases
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter

T = TypeVar("T")


@lru_cache(maxsize=None)
def _adapter(cls: type) -> TypeAdapter:
    return TypeAdapter(cls)


def to_record(entity: Any) -> dict[str, Any]:
    return _adapter(type(entity)).dump_python(entity, mode="json")


def from_record(cls: type[T], data: dict[str, Any]) -> T:
    return _adapter(cls).validate_python(data)
