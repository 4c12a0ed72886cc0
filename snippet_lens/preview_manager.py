from __future__ import annotations

from typing import List, Optional, Union

from .config.manager import SnippetLensSettings
from .core.session_log import get_active_logger, log_info
from .detector import locate
from .host import Document, SnippetHost
from .models import PreviewMode, SnippetPreview
from .preview import render_resolved
from .resolver import PathResolver


class PreviewManager:
    """Computes snippet previews for markdown documents."""

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
        self.mode = PreviewMode(self.settings.preview_mode)
        self._enabled = self.settings.enabled
        self._disposed = False

    def is_enabled(self) -> bool:
        return self._enabled and not self._disposed

    def toggle(self) -> bool:
        self._enabled = not self._enabled
        log_info("preview", "preview.toggle", {"enabled": self._enabled})
        return self._enabled

    def set_mode(self, mode: Union[PreviewMode, str]) -> PreviewMode:
        self.mode = PreviewMode(mode)
        return self.mode

    def update_previews(self, document: Document) -> List[SnippetPreview]:
        if not self.is_enabled() or not document.is_markdown:
            return []
        logger = get_active_logger()
        if logger is not None:
            logger.start_scan("preview", document=document.path or None)
        previews: List[SnippetPreview] = []
        for location in locate(document.text):
            resolved = self.resolver.resolve(
                location.path,
                document.path,
                self.workspace_root,
                self.settings.base_path,
            )
            text = None
            if resolved:
                text = render_resolved(
                    resolved,
                    self.settings.max_lines,
                    self.settings.max_chars,
                    self.host.read_file,
                    mode=self.mode,
                )
            previews.append(SnippetPreview(location=location, resolved_path=resolved, text=text))
        if logger is not None:
            logger.end_scan(
                "preview",
                references=len(previews),
                unresolved=sum(1 for p in previews if p.resolved_path is None),
            )
        return previews

    def dispose(self) -> None:
        self._disposed = True
