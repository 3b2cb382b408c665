"""
Recursive substitution over the supported template shapes.

Shapes are closed: every value is classified into exactly one
TemplateShape and each walk dispatches over that enumeration.
"""

import copy
import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from .coercion import ValueCoercer, ValueShape
from .matcher import match_whole, scan_all
from .scopes import ScopeResolver, SubstitutionType

logger = logging.getLogger(__name__)


class TemplateShape(str, Enum):
    """Structural kind of a template or document value."""
    SCALAR = "scalar"
    LIST = "list"
    TABLE = "table"
    DOCUMENT = "document"
    DOCUMENT_LIST = "document_list"
    OTHER = "other"


def _is_text_list(value: Any) -> bool:
    return isinstance(value, list) and all(item is None or isinstance(item, str) for item in value)


def classify(value: Any) -> TemplateShape:
    """
    Classify a value into its TemplateShape.

    An empty list is a text list. A list whose items are all text lists
    (or None) is a table; a list whose items are all documents (or None) is a document list.
    Mixed lists and every other type are OTHER and pass through untouched.
    """
    if isinstance(value, str):
        return TemplateShape.SCALAR
    if isinstance(value, Mapping):
        return TemplateShape.DOCUMENT
    if isinstance(value, list):
        if _is_text_list(value):
            return TemplateShape.LIST
        if all(row is None or _is_text_list(row) for row in value):
            return TemplateShape.TABLE
        if all(item is None or isinstance(item, Mapping) for item in value):
            return TemplateShape.DOCUMENT_LIST
    return TemplateShape.OTHER


class DocumentWalker:
    """
    Applies placeholder substitution to strings, lists, tables, documents
    and document lists.

    Inputs are never mutated; every walk builds a new output value.
    """

    def __init__(self, resolver: ScopeResolver, coercer: ValueCoercer):
        self.resolver = resolver
        self.coercer = coercer

    def walk_string(
        self,
        text: Optional[str],
        shape: ValueShape,
        default: Any,
        substitution_type: SubstitutionType,
        scopes: Sequence[Mapping[str, Any]]
    ) -> Any:
        """
        Substitute placeholders in a single string.

        When the whole string is one placeholder the resolved value is
        coerced to the requested shape, so '%n%' can yield an int. If that
        key is absent the whole original text is coerced instead. Embedded
        placeholders always compose back into text; an unresolved one is
        left as its literal token. Any shape other than STRING or ANY yields
        None for a template that is not a single placeholder.

        Args:
            text: Template text
            shape: Target shape of the result
            default: Value used when a resolved value is None
            substitution_type: Scope selector
            scopes: Local scopes in precedence order

        Returns:
            The substituted value, or None when text is None
        """
        if text is None:
            return None

        key = match_whole(text)
        if key is not None:
            found, value = self.resolver.resolve(key, substitution_type, scopes)
            if found:
                return self.coercer.apply_default(value, default, shape)
            logger.debug(f"Placeholder '{key}' not found, keeping template text")
            return self.coercer.coerce(text, shape)

        if shape not in (ValueShape.STRING, ValueShape.ANY):
            logger.debug(f"Embedded placeholders compose into text only, not {shape.value}")
            return None

        parts: List[str] = []
        position = 0
        for placeholder in scan_all(text):
            parts.append(text[position:placeholder.start])
            _, value = self.resolver.resolve(placeholder.key, substitution_type, scopes)
            replacement = self.coercer.coerce(value, ValueShape.STRING)
            if replacement is None and default is not None:
                replacement = self.coercer.coerce(default, ValueShape.STRING)
            if replacement is None:
                logger.debug(f"Placeholder '{placeholder.key}' not found, keeping literal")
                replacement = placeholder.text
            parts.append(replacement)
            position = placeholder.end
        parts.append(text[position:])

        return ''.join(parts)

    def walk_list(
        self,
        items: Optional[Sequence[Optional[str]]],
        shape: ValueShape,
        default: Any,
        substitution_type: SubstitutionType,
        scopes: Sequence[Mapping[str, Any]]
    ) -> Optional[List[Any]]:
        """Substitute each string of a list, preserving order and length."""
        if items is None:
            return None
        return [self.walk_string(item, shape, default, substitution_type, scopes) for item in items]

    def walk_table(
        self,
        table: Optional[Sequence[Optional[Sequence[Optional[str]]]]],
        shape: ValueShape,
        default: Any,
        substitution_type: SubstitutionType,
        scopes: Sequence[Mapping[str, Any]]
    ) -> Optional[List[Optional[List[Any]]]]:
        """Substitute each row of a table."""
        if table is None:
            return None
        return [self.walk_list(row, shape, default, substitution_type, scopes) for row in table]

    def walk_document(
        self,
        document: Optional[Mapping[str, Any]],
        default: Any,
        recurse: bool,
        include_nulls: bool,
        substitution_type: SubstitutionType,
        scopes: Sequence[Mapping[str, Any]]
    ) -> Optional[Dict[str, Any]]:
        """
        Substitute every value of a document, preserving key order.

        Text values, text lists and tables are always substituted. Nested
        documents and document lists are substituted with the same scopes
        only when recurse is set, otherwise copied as-is. Keys whose result
        is None are dropped unless include_nulls is set.

        When no scopes are given the document is its own scope.
        """
        if document is None:
            return None
        if not scopes:
            scopes = (document,)

        output: Dict[str, Any] = {}
        for key, value in document.items():
            if value is not None:
                value = self._walk_value(value, default, recurse, include_nulls, substitution_type, scopes)

            if value is not None or include_nulls:
                output[key] = value

        return output

    def walk_document_list(
        self,
        documents: Optional[Sequence[Optional[Mapping[str, Any]]]],
        default: Any,
        recurse: bool,
        include_nulls: bool,
        substitution_type: SubstitutionType,
        scopes: Sequence[Mapping[str, Any]]
    ) -> Optional[List[Optional[Dict[str, Any]]]]:
        """Substitute each document of a list, preserving order and length."""
        if documents is None:
            return None
        return [
            self.walk_document(document, default, recurse, include_nulls, substitution_type, scopes)
            for document in documents
        ]

    def _walk_value(
        self,
        value: Any,
        default: Any,
        recurse: bool,
        include_nulls: bool,
        substitution_type: SubstitutionType,
        scopes: Sequence[Mapping[str, Any]]
    ) -> Any:
        shape = classify(value)

        if shape is TemplateShape.SCALAR:
            return self.walk_string(value, ValueShape.STRING, default, substitution_type, scopes)
        if shape is TemplateShape.LIST:
            return self.walk_list(value, ValueShape.STRING, default, substitution_type, scopes)
        if shape is TemplateShape.TABLE:
            return self.walk_table(value, ValueShape.STRING, default, substitution_type, scopes)
        if shape is TemplateShape.DOCUMENT:
            if recurse:
                return self.walk_document(value, default, recurse, include_nulls, substitution_type, scopes)
            return copy.deepcopy(value)
        if shape is TemplateShape.DOCUMENT_LIST:
            if recurse:
                return self.walk_document_list(value, default, recurse, include_nulls, substitution_type, scopes)
            return copy.deepcopy(value)
        if shape is TemplateShape.OTHER:
            if isinstance(value, list):
                return copy.deepcopy(value)
            return value

        raise AssertionError(f"Unhandled template shape: {shape}")
