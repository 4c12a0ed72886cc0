from __future__ import annotations

from typing import List, Optional

from .config.manager import SnippetLensSettings
from .core.session_log import log_exception
from .detector import line_and_column, locate
from .host import Document, SnippetHost
from .models import SnippetDiagnostic, SnippetLocation
from .resolver import PathResolver

DIAGNOSTIC_SOURCE = "mkdocs-snippet-lens"
SEVERITY_ERROR = "error"


def not_found_message(raw_path: str) -> str:
    return f"Snippet file not found: '{raw_path}'"


class DiagnosticManager:
    """Turns unresolved snippet references into diagnostics."""

    def __init__(
        self,
        host: SnippetHost,
        settings: Optional[SnippetLensSettings] = None,
        workspace_root: str = "",
    ) -> None:
        self.host = host
        self.settings = settings or SnippetLensSettings()
        self.workspace_root = workspace_root
        self.resolver = PathResolver(host.exists)

    def collect(self, document: Document) -> List[SnippetDiagnostic]:
        if not document.is_markdown:
            return []
        diagnostics: List[SnippetDiagnostic] = []
        for location in locate(document.text):
            resolved = self.resolver.resolve(
                location.path,
                document.path,
                self.workspace_root,
                self.settings.base_path,
            )
            if resolved is None:
                diagnostics.append(self._build(document, location))
        return diagnostics

    def update(self, document: Document) -> List[SnippetDiagnostic]:
        diagnostics = self.collect(document)
        for diagnostic in diagnostics:
            try:
                self.host.report_unresolved(document, diagnostic)
            except Exception as exc:  # noqa: BLE001
                log_exception("diagnostics", exc)
        return diagnostics

    def _build(self, document: Document, location: SnippetLocation) -> SnippetDiagnostic:
        line, column = line_and_column(document.text, location.start_offset)
        return SnippetDiagnostic(
            location=location,
            message=not_found_message(location.path),
            severity=SEVERITY_ERROR,
            source=DIAGNOSTIC_SOURCE,
            line=line,
            column=column,
        )
