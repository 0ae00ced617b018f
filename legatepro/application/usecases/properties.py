"""
===============================================================================
USE CASES: Properties
===============================================================================

Real property held by an estate (house, condo, land). Rent payments and
utility accounts may point at a property of the same estate.
===============================================================================
"""

from __future__ import annotations

from typing import Any, Mapping

from ...domain.entities import EstateEventType, Property, PropertyType
from ...domain.repositories import PropertyRepository
from .. import inputs
from ..results import Invalid
from .base import EstateScopedUseCases, parse_fields


def _measure(key: str):
    def parse(data: Mapping[str, Any]) -> float | None:
        return inputs.amount(
            data,
            key,
            required=False,
            code=f"invalid_{key}",
            message=f"{key} must be a number",
        )

    return parse


_PARSERS = {
    "label": lambda d: inputs.text(d, "label"),
    "address_line1": lambda d: inputs.text(d, "address_line1"),
    "address_line2": lambda d: inputs.text(d, "address_line2"),
    "city": lambda d: inputs.text(d, "city"),
    "state": lambda d: inputs.text(d, "state"),
    "postal_code": lambda d: inputs.text(d, "postal_code"),
    "property_type": lambda d: inputs.choice(
        d,
        "property_type",
        PropertyType,
        code="invalid_property_type",
        message="Invalid property type",
        default=PropertyType.SINGLE_FAMILY,
    ),
    "bedrooms": _measure("bedrooms"),
    "bathrooms": _measure("bathrooms"),
    "square_feet": _measure("square_feet"),
    "estimated_value": _measure("estimated_value"),
    "monthly_rent_target": _measure("monthly_rent_target"),
    "is_rented": lambda d: inputs.boolean(d, "is_rented", False),
    "is_sold": lambda d: inputs.boolean(d, "is_sold", False),
    "notes": lambda d: inputs.text(d, "notes"),
}


def check_property_in_estate(
    properties: PropertyRepository, estate_id: str, property_id: str | None
) -> Invalid | None:
    """Invalid unless `property_id` is empty or names a property of the estate."""
    if property_id is None:
        return None
    found = properties.get(property_id)
    if found is None or found.estate_id != estate_id:
        return Invalid(code="invalid_property", message="Property not found for this estate")
    return None


class PropertyUseCases(EstateScopedUseCases[Property]):
    resource = "Property"
    segment = "properties"
    entity_cls = Property

    created_event = EstateEventType.PROPERTY_CREATED
    updated_event = EstateEventType.PROPERTY_UPDATED
    deleted_event = EstateEventType.PROPERTY_DELETED

    def _parse(self, data: Mapping[str, Any], *, partial: bool) -> dict[str, Any]:
        return parse_fields(data, _PARSERS, partial=partial)
