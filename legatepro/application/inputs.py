"""
Name: Raw Input Parsing

Responsibilities:
  - Coerce loosely-typed request data (JSON bodies, browser forms) into
    domain values: trimmed text, finite amounts, dates, booleans, enums
  - Fail with DomainValidationError(code, message) so every transport reports
    the same validation code

Collaborators:
  - application.usecases.*: parse inputs before building entities
  - interfaces.web.forms: feeds form fields (already snake_cased)

Notes:
  - Form checkboxes arrive as "on"; JSON booleans arrive as bool
  - Amount strings may carry thousands separators ("1,200.50")
"""

from __future__ import annotations

import math
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, TypeVar

from ..domain.errors import DomainValidationError

E = TypeVar("E", bound=Enum)

_TRUE = {"true", "1", "on", "yes"}
_FALSE = {"false", "0", "off", "no"}


def _blank(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def text(data: Mapping[str, Any], key: str) -> str | None:
    raw = data.get(key)
    if _blank(raw):
        return None
    return str(raw).strip()


def required_text(data: Mapping[str, Any], key: str, code: str, message: str) -> str:
    value = text(data, key)
    if value is None:
        raise DomainValidationError(code, message)
    return value


def number(raw: Any) -> float | None:
    """Parse a finite number; None when blank; ValueError when malformed."""
    if _blank(raw):
        return None
    if isinstance(raw, bool):
        raise ValueError("boolean is not a number")
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        value = float(str(raw).replace(",", "").strip())
    if not math.isfinite(value):
        raise ValueError("number must be finite")
    return value


def amount(
    data: Mapping[str, Any],
    key: str,
    *,
    required: bool = True,
    code: str = "invalid_amount",
    message: str = "Valid amount is required",
) -> float | None:
    try:
        value = number(data.get(key))
    except ValueError as exc:
        raise DomainValidationError(code, message) from exc
    if value is None and required:
        raise DomainValidationError(code, message)
    return value


def integer(
    data: Mapping[str, Any],
    key: str,
    *,
    code: str,
    message: str,
    minimum: int | None = None,
    maximum: int | None = None,
) -> int | None:
    try:
        value = number(data.get(key))
    except ValueError as exc:
        raise DomainValidationError(code, message) from exc
    if value is None:
        return None
    if not value.is_integer():
        raise DomainValidationError(code, message)
    result = int(value)
    if minimum is not None and result < minimum:
        raise DomainValidationError(code, message)
    if maximum is not None and result > maximum:
        raise DomainValidationError(code, message)
    return result


def boolean(data: Mapping[str, Any], key: str, default: bool | None = None) -> bool | None:
    raw = data.get(key)
    if isinstance(raw, bool):
        return raw
    if _blank(raw):
        return default
    lowered = str(raw).strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise DomainValidationError(f"invalid_{key}", f"{key} must be true or false")


def parse_date(raw: Any) -> date | None:
    """Accept date objects, YYYY-MM-DD and ISO-8601 datetimes."""
    if _blank(raw):
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    value = str(raw).strip()
    try:
        if len(value) == 10:
            return date.fromisoformat(value)
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError as exc:
        raise ValueError(f"invalid date: {value!r}") from exc


def date_field(
    data: Mapping[str, Any],
    key: str,
    *,
    required: bool = False,
    missing: tuple[str, str] | None = None,
    invalid: tuple[str, str] = ("invalid_date", "Invalid date"),
) -> date | None:
    try:
        value = parse_date(data.get(key))
    except ValueError as exc:
        raise DomainValidationError(*invalid) from exc
    if value is None and required:
        raise DomainValidationError(*(missing or invalid))
    return value


def choice(
    data: Mapping[str, Any],
    key: str,
    enum_cls: type[E],
    *,
    code: str,
    message: str,
    default: E | None = None,
    upper: bool = False,
) -> E | None:
    raw = text(data, key)
    if raw is None:
        return default
    try:
        return enum_cls(raw.upper() if upper else raw.lower())
    except ValueError as exc:
        raise DomainValidationError(code, message) from exc


def tags(data: Mapping[str, Any], key: str = "tags") -> list[str]:
    raw = data.get(key)
    if _blank(raw):
        return []
    if isinstance(raw, str):
        return [part.strip() for part in raw.split(",") if part.strip()]
    if isinstance(raw, (list, tuple)):
        return [str(part).strip() for part in raw if not _blank(part)]
    raise DomainValidationError("invalid_tags", "tags must be a list of strings")


def present(data: Mapping[str, Any], key: str) -> bool:
    """True when a partial update carries `key` (even with a null value)."""
    return key in data
