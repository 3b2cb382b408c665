"""Substitution exceptions."""

from typing import Any, List
from dataclasses import dataclass


class SubstitutionError(Exception):
    """Base class for errors raised by the substitution engine."""


class InvalidArgumentError(SubstitutionError, ValueError):
    """Raised when a call is missing a required argument (e.g. target shape)."""


class ConversionError(SubstitutionError, ValueError):
    """Raised when a value cannot be represented as the requested shape."""

    def __init__(self, value: Any, shape: Any, reason: str = ""):
        self.value = value
        self.shape = shape
        shape_name = getattr(shape, 'value', shape)
        message = f"Cannot convert {type(value).__name__} value {value!r} to {shape_name}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


@dataclass
class ValidationError:
    """Single validation error."""
    message: str
    path: str = ""
    exit_code: int = 2


class ScopeValidationError(SubstitutionError):
    """Raised when a scope, globals or template file fails validation.

    Collects every error found so the CLI can report them together and
    map them to the validation exit code.
    """

    def __init__(self, errors: List[ValidationError]):
        self.errors = errors
        self.exit_code = 2

        messages = []
        for error in errors:
            if error.path:
                messages.append(f"Validation error: {error.path}: {error.message}")
            else:
                messages.append(f"Validation error: {error.message}")

        super().__init__("\n".join(messages))
