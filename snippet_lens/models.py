from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PreviewMode(str, Enum):
    INLINE = "inline"
    BLOCK = "block"


@dataclass(frozen=True)
class SnippetReference:
    """A raw path captured from a ``--8<--`` token, exactly as written."""

    path: str


@dataclass(frozen=True)
class SnippetLocation:
    """Where a reference token sits in the scanned text.

    ``start_offset``/``end_offset`` cover the whole token, quotes included.
    ``line_end_offset`` points at the terminator of the line holding the token,
    or at the end of the text when there is none.
    """

    reference: SnippetReference
    start_offset: int
    end_offset: int
    line_end_offset: int

    @property
    def path(self) -> str:
        return self.reference.path

    @property
    def path_end_offset(self) -> int:
        # The token always ends with the closing quote.
        return self.end_offset - 1

    @property
    def path_start_offset(self) -> int:
        return self.path_end_offset - len(self.reference.path)


@dataclass(frozen=True)
class SnippetPreview:
    location: SnippetLocation
    resolved_path: Optional[str]
    text: Optional[str]


@dataclass(frozen=True)
class SnippetDiagnostic:
    location: SnippetLocation
    message: str
    severity: str
    source: str
    line: int
    column: int


@dataclass(frozen=True)
class SnippetLink:
    location: SnippetLocation
    start_offset: int
    end_offset: int
    target: str
