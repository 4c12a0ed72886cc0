from __future__ import annotations

from typing import List, Optional

from .config.manager import SnippetLensSettings
from .detector import locate
from .host import Document
from .models import SnippetLink
from .resolver import PathResolver


class SnippetLinkProvider:
    """Links the quoted path of each resolvable snippet to its file."""

    def __init__(
        self,
        resolver: PathResolver,
        settings: Optional[SnippetLensSettings] = None,
        workspace_root: str = "",
    ) -> None:
        self.resolver = resolver
        self.settings = settings or SnippetLensSettings()
        self.workspace_root = workspace_root

    def provide_links(self, document: Document) -> List[SnippetLink]:
        if not document.is_markdown:
            return []
        links: List[SnippetLink] = []
        for location in locate(document.text):
            target = self.resolver.resolve(
                location.path,
                document.path,
                self.workspace_root,
                self.settings.base_path,
            )
            if target is None:
                continue
            links.append(
                SnippetLink(
                    location=location,
                    start_offset=location.path_start_offset,
                    end_offset=location.path_end_offset,
                    target=target,
                )
            )
        return links
