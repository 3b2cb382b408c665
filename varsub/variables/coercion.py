"""
Value coercion.
Converts resolved values and defaults into a requested target shape using a
closed set of rules, one per ValueShape.
"""

import json
import math
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Union

from varsub.exceptions import ConversionError, InvalidArgumentError


class ValueShape(str, Enum):
    """Target shape a substituted value is converted to."""
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    LIST = "list"
    DOCUMENT = "document"
    ANY = "any"

    @classmethod
    def normalize(cls, value: Union['ValueShape', str, type, None]) -> 'ValueShape':
        """
        Normalize a shape given as a member, a name or a Python type.

        Raises:
            InvalidArgumentError: If the shape is missing or unknown
        """
        if value is None:
            raise InvalidArgumentError("target shape must be specified")
        if isinstance(value, cls):
            return value
        if isinstance(value, type):
            shape = _TYPE_SHAPES.get(value)
            if shape is not None:
                return shape
        elif isinstance(value, str):
            name = value.strip().lower()
            for member in cls:
                if member.value == name:
                    return member
        raise InvalidArgumentError(
            f"Unknown target shape {value!r}. Supported: {[m.value for m in cls]}"
        )


_TYPE_SHAPES = {
    str: ValueShape.STRING,
    int: ValueShape.INTEGER,
    float: ValueShape.FLOAT,
    Decimal: ValueShape.DECIMAL,
    bool: ValueShape.BOOLEAN,
    list: ValueShape.LIST,
    dict: ValueShape.DOCUMENT,
    object: ValueShape.ANY,
}

_TRUE_STRINGS = {'true', 'yes', '1'}
_FALSE_STRINGS = {'false', 'no', '0'}


class ValueCoercer:
    """Null-safe conversion of values into a ValueShape."""

    def coerce(self, value: Any, shape: Union[ValueShape, str, type, None]) -> Any:
        """
        Convert a value to the given shape.

        Args:
            value: Value to convert; None stays None
            shape: Target shape

        Returns:
            The converted value

        Raises:
            ConversionError: If the value cannot be represented as the shape
        """
        shape = ValueShape.normalize(shape)
        if value is None:
            return None

        if shape is ValueShape.ANY:
            return value
        if shape is ValueShape.STRING:
            return self._to_string(value)
        if shape is ValueShape.INTEGER:
            return self._to_integer(value)
        if shape is ValueShape.FLOAT:
            return self._to_float(value)
        if shape is ValueShape.DECIMAL:
            return self._to_decimal(value)
        if shape is ValueShape.BOOLEAN:
            return self._to_boolean(value)
        if shape is ValueShape.LIST:
            if isinstance(value, (list, tuple)):
                return list(value)
            return [value]
        if shape is ValueShape.DOCUMENT:
            if isinstance(value, Mapping):
                return dict(value)
            raise ConversionError(value, shape)

        raise ConversionError(value, shape, "unsupported shape")

    def apply_default(self, value: Any, default: Any, shape: Union[ValueShape, str, type, None]) -> Any:
        """
        Coerce a value, falling back to the coerced default when it is None.
        """
        output = self.coerce(value, shape)
        if output is None and default is not None:
            output = self.coerce(default, shape)
        return output

    def _to_string(self, value: Any) -> str:
        if isinstance(value, str):
            return value
        if isinstance(value, bool):
            return 'true' if value else 'false'
        if isinstance(value, (int, float, Decimal)):
            return str(value)
        if isinstance(value, (Mapping, list, tuple)):
            try:
                return json.dumps(value, default=str)
            except (TypeError, ValueError) as e:
                raise ConversionError(value, ValueShape.STRING, str(e)) from e
        return str(value)

    def _to_integer(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ConversionError(value, ValueShape.INTEGER)
        if isinstance(value, int):
            return value
        if isinstance(value, (float, Decimal)):
            if not math.isfinite(value) or value != int(value):
                raise ConversionError(value, ValueShape.INTEGER, "not an integral number")
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError as e:
                raise ConversionError(value, ValueShape.INTEGER) from e
        raise ConversionError(value, ValueShape.INTEGER)

    def _to_float(self, value: Any) -> float:
        if isinstance(value, bool):
            raise ConversionError(value, ValueShape.FLOAT)
        if isinstance(value, (int, float, Decimal)):
            return float(value)
        if isinstance(value, str):
            try:
                return float(value.strip())
            except ValueError as e:
                raise ConversionError(value, ValueShape.FLOAT) from e
        raise ConversionError(value, ValueShape.FLOAT)

    def _to_decimal(self, value: Any) -> Decimal:
        if isinstance(value, bool):
            raise ConversionError(value, ValueShape.DECIMAL)
        if isinstance(value, Decimal):
            return value
        if isinstance(value, (int, float, str)):
            text = value.strip() if isinstance(value, str) else str(value)
            try:
                return Decimal(text)
            except InvalidOperation as e:
                raise ConversionError(value, ValueShape.DECIMAL) from e
        raise ConversionError(value, ValueShape.DECIMAL)

    def _to_boolean(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        if isinstance(value, str):
            text = value.strip().lower()
            if text in _TRUE_STRINGS:
                return True
            if text in _FALSE_STRINGS:
                return False
        raise ConversionError(value, ValueShape.BOOLEAN)
