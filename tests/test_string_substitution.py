"""
Tests for substitution in strings, string lists and string tables.
"""

from decimal import Decimal

import pytest

from varsub.exceptions import ConversionError, InvalidArgumentError
from varsub.variables import SubstitutionType, ValueShape


class TestWholeTemplate:
    """A template that is exactly one placeholder yields a typed value."""

    def test_typed_result(self, engine):
        result = engine.substitute_string("%n%", ValueShape.INTEGER, None, SubstitutionType.ALL, {"n": "42"})
        assert result == 42
        assert isinstance(result, int)

    def test_python_type_as_shape(self, engine):
        assert engine.substitute_string("%price%", Decimal, None, "all", {"price": "9.99"}) == Decimal("9.99")

    def test_non_text_value_kept_with_any_shape(self, engine):
        items = ["a", "b"]
        result = engine.substitute_string("%items%", ValueShape.ANY, None, "all", {"items": items})
        assert result == ["a", "b"]

    def test_missing_key_returns_whole_template(self, engine):
        assert engine.substitute_string("%missing%", ValueShape.STRING, None, "all", {}) == "%missing%"

    def test_missing_key_ignores_default(self, engine):
        """The default only replaces a null value, not an absent key."""
        assert engine.substitute_string("%missing%", str, "dflt", "all", {}) == "%missing%"

    def test_missing_key_coerces_whole_template(self, engine):
        with pytest.raises(ConversionError):
            engine.substitute_string("%missing%", ValueShape.INTEGER, None, "all", {})

    def test_null_value_uses_default(self, engine):
        assert engine.substitute_string("%n%", int, "5", "all", {"n": None}) == 5

    def test_null_value_without_default(self, engine):
        assert engine.substitute_string("%n%", str, None, "all", {"n": None}) is None

    def test_conversion_error_propagates(self, engine):
        with pytest.raises(ConversionError):
            engine.substitute_string("%n%", int, None, "all", {"n": "forty-two"})


class TestEmbedded:
    """Placeholders embedded in surrounding text always compose into text."""

    def test_all_resolved(self, engine):
        result = engine.substitute_string(
            "Hello %first% %last%!", str, None, "all", {"first": "Ada", "last": "Lovelace"}
        )
        assert result == "Hello Ada Lovelace!"

    def test_missing_key_left_as_literal(self, engine):
        assert engine.substitute_string("Hello %name%!", ValueShape.STRING, None, "all", {}) == "Hello %name%!"

    def test_partial_resolution(self, engine):
        result = engine.substitute_string("%a%-%b%", str, None, "all", {"a": "1"})
        assert result == "1-%b%"

    def test_default_for_missing_and_null(self, engine):
        result = engine.substitute_string("%a%/%b%", str, "?", "all", {"a": None})
        assert result == "?/?"

    def test_non_text_values_rendered_as_text(self, engine):
        scope = {"n": 3, "flag": False, "tags": ["x", "y"]}
        result = engine.substitute_string("n=%n% flag=%flag% tags=%tags%", str, None, "all", scope)
        assert result == 'n=3 flag=false tags=["x", "y"]'

    def test_replacement_text_is_literal(self, engine):
        """Backslashes, group references and '%' in values are copied verbatim."""
        scope = {"path": r"C:\new\1", "ref": r"\g<0>", "pct": "%other%", "other": "no"}
        result = engine.substitute_string("[%path%] [%ref%] [%pct%]", str, None, "all", scope)
        assert result == r"[C:\new\1] [\g<0>] [%other%]"

    def test_embedded_only_composes_text(self, engine):
        """A template that is not one whole placeholder has no typed result."""
        scope = {"a": "1", "b": "2"}
        assert engine.substitute_string("%a%%b%", int, None, "all", scope) is None
        assert engine.substitute_string("abc", ValueShape.INTEGER, None, "all", scope) is None
        assert engine.substitute_list(["%a%", "x%a%"], int, None, "all", scope) == [1, None]
        assert engine.substitute_string("%a%%b%", ValueShape.ANY, None, "all", scope) == "12"

    def test_identity_without_placeholders(self, engine):
        for text in ["", "plain text", "100% natural", "a % b"]:
            assert engine.substitute_string(text, str, "dflt", "all", {"a": "x"}) == text


class TestScopes:
    """Scope precedence through the public API."""

    def test_local_beats_global(self, engine, global_variables):
        global_variables.put("k", "global")
        assert engine.substitute_string("%k%", str, None, SubstitutionType.ALL, {"k": "local"}) == "local"

    def test_global_selector(self, engine, global_variables):
        global_variables.put("k", "global")
        assert engine.substitute_string("%k%", str, None, SubstitutionType.GLOBAL, {"k": "local"}) == "global"

    def test_local_selector_ignores_global(self, engine, global_variables):
        global_variables.put("k", "global")
        assert engine.substitute_string("%k%", str, None, SubstitutionType.LOCAL, {}) == "%k%"

    def test_global_fallback_without_local_scopes(self, engine, global_variables):
        global_variables.put("env", "prod")
        assert engine.substitute_string("env=%env%", str, None, "all") == "env=prod"

    def test_scopes_consulted_in_order(self, engine):
        result = engine.substitute_string("%k%", str, None, "all", {"x": 1}, {"k": "second"}, {"k": "third"})
        assert result == "second"


class TestArguments:

    def test_shape_required(self, engine):
        with pytest.raises(InvalidArgumentError):
            engine.substitute_string("%k%", None, None, "all", {"k": "v"})

    def test_unknown_selector(self, engine):
        with pytest.raises(InvalidArgumentError):
            engine.substitute_string("%k%", str, None, "everywhere", {"k": "v"})

    def test_null_template(self, engine):
        assert engine.substitute_string(None, str, None, "all", {}) is None
        assert engine.substitute_list(None, str, None, "all", {}) is None
        assert engine.substitute_table(None, str, None, "all", {}) is None


class TestListsAndTables:

    def test_list_elementwise(self, engine):
        items = ["%a%", "x-%b%", "plain", None, "%missing%"]
        result = engine.substitute_list(items, str, None, "all", {"a": "A", "b": "B"})
        assert result == ["A", "x-B", "plain", None, "%missing%"]

    def test_list_typed(self, engine):
        assert engine.substitute_list(["%a%", "%b%"], int, None, "all", {"a": "1", "b": 2}) == [1, 2]

    def test_list_is_new_object(self, engine):
        items = ["%a%"]
        result = engine.substitute_list(items, str, None, "all", {"a": "A"})
        assert items == ["%a%"]
        assert result is not items

    def test_table_rowwise(self, engine):
        table = [["%a%", "b"], [], ["%c% and %a%"]]
        result = engine.substitute_table(table, str, None, "all", {"a": "1", "c": "3"})
        assert result == [["1", "b"], [], ["3 and 1"]]
        assert table == [["%a%", "b"], [], ["%c% and %a%"]]

    def test_table_conversion_error_aborts(self, engine):
        with pytest.raises(ConversionError):
            engine.substitute_table([["%a%"], ["%b%"]], int, None, "all", {"a": "1", "b": "x"})
