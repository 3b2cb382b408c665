"""
Tests for placeholder matching.
Covers whole-template matches and left-to-right scanning of embedded placeholders.
"""

from varsub.variables.matcher import Placeholder, has_placeholders, match_whole, scan_all


def test_match_whole_single_token():
    """A template that is exactly one token yields its key."""
    assert match_whole("%name%") == "name"
    assert match_whole("%a b.c%") == "a b.c"


def test_match_whole_rejects_surrounding_text():
    """Anything before or after the token means no whole match."""
    assert match_whole("x%name%") is None
    assert match_whole("%name% ") is None
    assert match_whole("%a%%b%") is None


def test_match_whole_rejects_empty_and_unclosed():
    """An empty body or a missing closing delimiter is not a placeholder."""
    assert match_whole("%%") is None
    assert match_whole("%name") is None
    assert match_whole("") is None


def test_scan_all_left_to_right():
    """Placeholders are reported in order with their spans and literal text."""
    found = list(scan_all("Hello %first% %last%!"))

    assert found == [
        Placeholder(key="first", start=6, end=13, text="%first%"),
        Placeholder(key="last", start=14, end=20, text="%last%"),
    ]


def test_scan_all_non_overlapping():
    """'%a%b%c%' matches %a% and %c%; 'b' sits between two matches."""
    keys = [p.key for p in scan_all("%a%b%c%")]
    assert keys == ["a", "c"]


def test_scan_all_unmatched_percent_is_literal():
    """A stray '%' produces no match."""
    assert list(scan_all("100% sure")) == []
    assert [p.key for p in scan_all("50% of %total%")] == [" of "]


def test_scan_all_is_restartable():
    """Each call returns a fresh, lazy iterator."""
    template = "%a% and %b%"
    first = scan_all(template)
    assert next(first).key == "a"
    assert [p.key for p in scan_all(template)] == ["a", "b"]
    assert next(first).key == "b"


def test_has_placeholders():
    assert has_placeholders("x %y% z")
    assert not has_placeholders("no tokens here")
    assert not has_placeholders("only one % sign")
