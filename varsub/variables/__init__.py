"""
Variable substitution module.
Implements %key% placeholder resolution over strings, lists, tables and documents.
"""

from .coercion import ValueCoercer, ValueShape
from .matcher import PLACEHOLDER_PATTERN, Placeholder, has_placeholders, match_whole, scan_all
from .scopes import (
    GlobalScope,
    GlobalVariables,
    ScopeResolver,
    SubstitutionType,
    get_global_variables,
)
from .substitution import SubstitutionEngine, get_default_engine, substitute
from .walker import DocumentWalker, TemplateShape, classify

__all__ = [
    'DocumentWalker',
    'GlobalScope',
    'GlobalVariables',
    'PLACEHOLDER_PATTERN',
    'Placeholder',
    'ScopeResolver',
    'SubstitutionEngine',
    'SubstitutionType',
    'TemplateShape',
    'ValueCoercer',
    'ValueShape',
    'classify',
    'get_default_engine',
    'get_global_variables',
    'has_placeholders',
    'match_whole',
    'scan_all',
    'substitute',
]
