"""
Variable substitution engine.
Resolves %key% placeholders in strings, lists, tables, documents and
document lists against ordered local scopes and the global scope.
"""

import copy
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from varsub.exceptions import InvalidArgumentError

from .coercion import ValueCoercer, ValueShape
from .scopes import GlobalScope, ScopeResolver, SubstitutionType
from .walker import DocumentWalker, TemplateShape, classify

logger = logging.getLogger(__name__)

Scope = Mapping[str, Any]
ShapeArg = Union[ValueShape, str, type, None]
SelectorArg = Union[SubstitutionType, str, None]


class SubstitutionEngine:
    """
    Stateless entry point for placeholder substitution.

    Local scopes are consulted in the order given, first hit wins; the
    global scope is consulted last. Usage:

        engine = SubstitutionEngine()
        engine.substitute_string("%n%", int, None, SubstitutionType.ALL, {"n": "42"})  # -> 42
        engine.substitute_string("Hi %who%!", str, None, "all", {"who": "Bob"})  # -> "Hi Bob!"
    """

    def __init__(self, global_scope: Optional[GlobalScope] = None):
        """
        Initialize the engine.

        Args:
            global_scope: Global scope consulted after the local scopes;
                the process-wide store when not given
        """
        self.resolver = ScopeResolver(global_scope)
        self.coercer = ValueCoercer()
        self.walker = DocumentWalker(self.resolver, self.coercer)

    @property
    def global_scope(self) -> GlobalScope:
        return self.resolver.global_scope

    def substitute_string(
        self,
        text: Optional[str],
        shape: ShapeArg,
        default: Any = None,
        substitution_type: SelectorArg = SubstitutionType.ALL,
        *scopes: Scope
    ) -> Any:
        """
        Substitute placeholders in a string.

        Args:
            text: Template string
            shape: Shape of the returned value (e.g. ValueShape.INTEGER or int)
            default: Value used when a placeholder resolves to None
            substitution_type: Which scopes are eligible (all, local, global)
            *scopes: Local scopes in precedence order

        Returns:
            The substituted value in the requested shape, or None if text is None

        Raises:
            InvalidArgumentError: If shape is not specified
            ConversionError: If a value cannot be converted to the shape
        """
        shape = ValueShape.normalize(shape)
        substitution_type = SubstitutionType.normalize(substitution_type)
        return self.walker.walk_string(text, shape, default, substitution_type, scopes)

    def substitute_list(
        self,
        items: Optional[Sequence[Optional[str]]],
        shape: ShapeArg,
        default: Any = None,
        substitution_type: SelectorArg = SubstitutionType.ALL,
        *scopes: Scope
    ) -> Optional[List[Any]]:
        """Substitute placeholders in every string of a list."""
        shape = ValueShape.normalize(shape)
        substitution_type = SubstitutionType.normalize(substitution_type)
        return self.walker.walk_list(items, shape, default, substitution_type, scopes)

    def substitute_table(
        self,
        table: Optional[Sequence[Optional[Sequence[Optional[str]]]]],
        shape: ShapeArg,
        default: Any = None,
        substitution_type: SelectorArg = SubstitutionType.ALL,
        *scopes: Scope
    ) -> Optional[List[Optional[List[Any]]]]:
        """Substitute placeholders in every cell of a table (list of rows)."""
        shape = ValueShape.normalize(shape)
        substitution_type = SubstitutionType.normalize(substitution_type)
        return self.walker.walk_table(table, shape, default, substitution_type, scopes)

    def substitute_document(
        self,
        document: Optional[Mapping[str, Any]],
        default: Any = None,
        recurse: bool = False,
        include_nulls: bool = False,
        substitution_type: SelectorArg = SubstitutionType.ALL,
        *scopes: Scope
    ) -> Optional[Dict[str, Any]]:
        """
        Substitute placeholders in every value of a document.

        Args:
            document: Template document
            default: Value used when a placeholder resolves to None
            recurse: Also substitute nested documents and document lists
            include_nulls: Keep keys whose substituted value is None
            substitution_type: Which scopes are eligible (all, local, global)
            *scopes: Local scopes; the document itself when none are given

        Returns:
            A new document with the same key order, or None if document is None
        """
        substitution_type = SubstitutionType.normalize(substitution_type)
        return self.walker.walk_document(document, default, recurse, include_nulls, substitution_type, scopes)

    def substitute_document_list(
        self,
        documents: Optional[Sequence[Optional[Mapping[str, Any]]]],
        default: Any = None,
        recurse: bool = False,
        include_nulls: bool = False,
        substitution_type: SelectorArg = SubstitutionType.ALL,
        *scopes: Scope
    ) -> Optional[List[Optional[Dict[str, Any]]]]:
        """Substitute placeholders in every document of a list."""
        substitution_type = SubstitutionType.normalize(substitution_type)
        return self.walker.walk_document_list(documents, default, recurse, include_nulls, substitution_type, scopes)

    def substitute(
        self,
        template: Any,
        shape: ShapeArg = ValueShape.STRING,
        default: Any = None,
        recurse: bool = False,
        include_nulls: bool = False,
        substitution_type: SelectorArg = SubstitutionType.ALL,
        scopes: Sequence[Scope] = ()
    ) -> Any:
        """
        Substitute placeholders in a template of any supported shape.

        Dispatches on the template's shape. shape applies to strings, lists
        and tables; recurse and include_nulls apply to documents and
        document lists. Templates of any other type are returned unchanged.
        """
        if template is None:
            return None

        template_shape = classify(template)
        logger.debug(f"Substituting {template_shape.value} template")

        if template_shape is TemplateShape.SCALAR:
            return self.substitute_string(template, shape, default, substitution_type, *scopes)
        if template_shape is TemplateShape.LIST:
            return self.substitute_list(template, shape, default, substitution_type, *scopes)
        if template_shape is TemplateShape.TABLE:
            return self.substitute_table(template, shape, default, substitution_type, *scopes)
        if template_shape is TemplateShape.DOCUMENT:
            return self.substitute_document(template, default, recurse, include_nulls, substitution_type, *scopes)
        if template_shape is TemplateShape.DOCUMENT_LIST:
            return self.substitute_document_list(
                template, default, recurse, include_nulls, substitution_type, *scopes
            )
        if template_shape is TemplateShape.OTHER:
            if isinstance(template, list):
                return copy.deepcopy(template)
            return template

        raise InvalidArgumentError(f"Unsupported template shape: {template_shape}")


_default_engine: Optional[SubstitutionEngine] = None


def get_default_engine() -> SubstitutionEngine:
    """Return an engine bound to the process-wide global scope."""
    global _default_engine
    if _default_engine is None:
        _default_engine = SubstitutionEngine()
    return _default_engine


def substitute(
    template: Any,
    shape: ShapeArg = ValueShape.STRING,
    default: Any = None,
    recurse: bool = False,
    include_nulls: bool = False,
    substitution_type: SelectorArg = SubstitutionType.ALL,
    scopes: Sequence[Scope] = ()
) -> Any:
    """Substitute placeholders using the default engine. See SubstitutionEngine.substitute."""
    return get_default_engine().substitute(
        template,
        shape=shape,
        default=default,
        recurse=recurse,
        include_nulls=include_nulls,
        substitution_type=substitution_type,
        scopes=scopes
    )
