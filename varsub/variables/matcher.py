"""
Placeholder matching.
Recognizes %key% tokens, either as a whole template or embedded in text.
"""

import re
from dataclasses import dataclass
from typing import Iterator, Optional


# Exactly '%' + one or more non-'%' characters + '%'; no escape syntax exists
PLACEHOLDER_PATTERN = re.compile(r'%([^%]+)%')


@dataclass(frozen=True)
class Placeholder:
    """A placeholder found in a template.

    Attributes:
        key: The variable name between the delimiters
        start: Index of the opening '%'
        end: Index just past the closing '%'
        text: The literal token, delimiters included
    """
    key: str
    start: int
    end: int
    text: str


def match_whole(template: str) -> Optional[str]:
    """
    Return the key when the entire template is exactly one placeholder.

    Args:
        template: Template text

    Returns:
        The placeholder key, or None when the template is not a single token
    """
    match = PLACEHOLDER_PATTERN.fullmatch(template)
    if match:
        return match.group(1)
    return None


def scan_all(template: str) -> Iterator[Placeholder]:
    """
    Lazily yield every placeholder in the template, left to right.

    Matches never overlap; a '%' with no closing '%' is literal text and
    produces nothing. Each call returns a fresh iterator.
    """
    for match in PLACEHOLDER_PATTERN.finditer(template):
        yield Placeholder(
            key=match.group(1),
            start=match.start(),
            end=match.end(),
            text=match.group(0)
        )


def has_placeholders(template: str) -> bool:
    """Whether the template contains at least one placeholder."""
    return PLACEHOLDER_PATTERN.search(template) is not None
