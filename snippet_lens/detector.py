"""Detection of MkDocs snippet references (``--8<-- "path"``) in text."""

from __future__ import annotations

import re
from typing import List

from .models import SnippetLocation, SnippetReference

# One quote class for both ends: mismatched quotes still match.
SNIPPET_PATTERN = re.compile(r"""--8<--\s+["']([^"']+)["']""")
LINE_TERMINATOR = re.compile(r"\r\n|\r|\n")


def detect(text: str) -> List[SnippetReference]:
    """Return every snippet reference in document order."""
    return [SnippetReference(path=match.group(1)) for match in SNIPPET_PATTERN.finditer(text)]


def locate(text: str) -> List[SnippetLocation]:
    """Return snippet references with the offsets of their tokens and lines."""
    locations: List[SnippetLocation] = []
    for match in SNIPPET_PATTERN.finditer(text):
        locations.append(
            SnippetLocation(
                reference=SnippetReference(path=match.group(1)),
                start_offset=match.start(),
                end_offset=match.end(),
                line_end_offset=_line_end(text, match.end()),
            )
        )
    return locations


def line_and_column(text: str, offset: int) -> tuple[int, int]:
    """Map an offset to a 0-based (line, column) pair."""
    line = 0
    line_start = 0
    for terminator in LINE_TERMINATOR.finditer(text, 0, offset):
        line += 1
        line_start = terminator.end()
    return line, offset - line_start


def _line_end(text: str, position: int) -> int:
    terminator = LINE_TERMINATOR.search(text, position)
    if terminator is None:
        return len(text)
    return terminator.start()
