"""
Section Extractor — pulls the lines that live under a given heading of a
Markdown note.

A "prop" is a heading label (e.g. ``Synapomorphies``) at a fixed heading
level.  The section runs from the line after the first matching heading up
to the next heading of equal or lesser depth, or the end of the note.
Deeper headings belong to the section.

Everything here is pure: no file access, no workspace.
"""

import re
from typing import Iterable

MIN_HEADER_LEVEL = 1
MAX_HEADER_LEVEL = 6

# ATX heading: up to three spaces of indent, 1-6 hashes, then text with an
# optional closing run of hashes.
HEADING_RE = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?(?:[ \t]+#+)?[ \t]*$")
FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})(.*)$")
LIST_ITEM_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+(?:\[[ xX]\]\s+)?(.*\S)\s*$")


class InvalidHeaderLevel(ValueError):
    """A heading level outside 1-6 was configured."""

    def __init__(self, level):
        super().__init__(
            f"header level must be an integer between {MIN_HEADER_LEVEL} "
            f"and {MAX_HEADER_LEVEL}, got {level!r}"
        )
        self.level = level


def validate_level(level) -> int:
    if isinstance(level, bool) or not isinstance(level, int):
        raise InvalidHeaderLevel(level)
    if not MIN_HEADER_LEVEL <= level <= MAX_HEADER_LEVEL:
        raise InvalidHeaderLevel(level)
    return level


def parse_heading(line: str) -> tuple[int, str] | None:
    """Return ``(level, text)`` if *line* is an ATX heading, else None."""
    match = HEADING_RE.match(line.rstrip("\r\n"))
    if not match:
        return None
    text = (match.group(2) or "").strip()
    return len(match.group(1)), text


def _as_lines(text: str | Iterable[str]) -> list[str]:
    if isinstance(text, str):
        return text.splitlines()
    return [line.rstrip("\r\n") for line in text]


def iter_headings(text: str | Iterable[str]):
    """Yield ``(index, level, text)`` for every heading outside code fences."""
    fence = None
    for index, line in enumerate(_as_lines(text)):
        fence_match = FENCE_RE.match(line)
        if fence_match:
            marker, rest = fence_match.groups()
            if fence is None:
                fence = marker
                continue
            # A closing fence carries no info string
            if marker[0] == fence[0] and len(marker) >= len(fence) and not rest.strip():
                fence = None
            continue
        if fence is not None:
            continue
        heading = parse_heading(line)
        if heading:
            yield index, heading[0], heading[1]


def extract_section(
    text: str | Iterable[str], label: str, level: int
) -> list[str]:
    """
    Lines under the first heading of *level* whose text equals *label*.

    Stops at the next heading of level <= *level*.  Returns an empty list
    when no such heading exists.  Raises InvalidHeaderLevel when *level* is
    not in 1-6.
    """
    validate_level(level)
    lines = _as_lines(text)
    target = label.strip()

    start = None
    for index, heading_level, heading_text in iter_headings(lines):
        if start is None:
            if heading_level == level and heading_text == target:
                start = index + 1
        elif heading_level <= level:
            return lines[start:index]

    if start is None:
        return []
    return lines[start:]


def list_items(lines: Iterable[str]) -> list[str]:
    """Text of every bullet or numbered list item, task boxes stripped."""
    items = []
    for line in lines:
        match = LIST_ITEM_RE.match(line)
        if match:
            items.append(match.group(1))
    return items
