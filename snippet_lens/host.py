"""Collaborators the core relies on for documents, files and reporting."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Protocol, Tuple, Union

from .core.session_log import log_warn
from .models import SnippetDiagnostic

MARKDOWN_LANGUAGE = "markdown"
PLAINTEXT_LANGUAGE = "plaintext"
MARKDOWN_SUFFIXES = {".md", ".markdown", ".mdown", ".mkd", ".mkdn"}


@dataclass(frozen=True)
class Document:
    text: str
    path: str = ""
    language_id: str = MARKDOWN_LANGUAGE

    @property
    def is_markdown(self) -> bool:
        return self.language_id == MARKDOWN_LANGUAGE

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Document":
        file_path = Path(path)
        text = file_path.read_text(encoding="utf-8", errors="replace")
        return cls(
            text=text,
            path=str(file_path.absolute()),
            language_id=language_for_path(file_path),
        )


def language_for_path(path: Union[str, Path]) -> str:
    if Path(path).suffix.lower() in MARKDOWN_SUFFIXES:
        return MARKDOWN_LANGUAGE
    return PLAINTEXT_LANGUAGE


class SnippetHost(Protocol):
    def exists(self, path: str) -> bool: ...

    def read_file(self, path: str) -> str: ...

    def report_unresolved(self, document: Document, diagnostic: SnippetDiagnostic) -> None: ...


class LocalFileHost:
    """Host backed by the local filesystem."""

    def __init__(self) -> None:
        self.reported: List[Tuple[Document, SnippetDiagnostic]] = []

    def exists(self, path: str) -> bool:
        return os.path.isfile(path)

    def read_file(self, path: str) -> str:
        return Path(path).read_text(encoding="utf-8", errors="replace")

    def report_unresolved(self, document: Document, diagnostic: SnippetDiagnostic) -> None:
        self.reported.append((document, diagnostic))
        log_warn(
            "host",
            "snippet.unresolved",
            {
                "document": document.path,
                "line": diagnostic.line + 1,
                "message": diagnostic.message,
            },
        )

    def clear(self) -> None:
        self.reported.clear()
