"""
Name: Domain Validation Errors

Responsibilities:
  - Carry a stable, machine-readable validation code plus a human message
  - Be raised by entity constructors when a required field is missing or a
    value is out of range

Collaborators:
  - domain/entities.py, domain/invoices.py: raise on invalid construction
  - application/inputs.py: raises the same error while parsing raw input
  - application/usecases/*: turn it into an Invalid(code, message) result
"""

from __future__ import annotations


class DomainValidationError(ValueError):
    """Invalid entity data. `code` is what form redirects carry in `?error=`."""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(message)
