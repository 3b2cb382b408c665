"""Placeholder substitution over strings, lists, tables and nested documents."""

from varsub.exceptions import ConversionError, InvalidArgumentError, SubstitutionError
from varsub.variables import (
    GlobalVariables,
    SubstitutionEngine,
    SubstitutionType,
    ValueShape,
    get_global_variables,
    substitute,
)

__version__ = "0.1.0"

__all__ = [
    'ConversionError',
    'GlobalVariables',
    'InvalidArgumentError',
    'SubstitutionEngine',
    'SubstitutionError',
    'SubstitutionType',
    'ValueShape',
    'get_global_variables',
    'substitute',
]
