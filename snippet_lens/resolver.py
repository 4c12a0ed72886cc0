from __future__ import annotations

import os
from typing import Callable, List, Optional

from .core.session_log import log_debug

ExistsCheck = Callable[[str], bool]


class PathResolver:
    """Resolves snippet paths against the configured snippet roots.

    The resolver performs no I/O of its own: every candidate is tested with
    the ``exists`` capability supplied at construction time, and nothing is
    cached between calls.

    Candidates, first existing one wins:

    1. an absolute ``raw_path`` as written (and nothing else);
    2. ``base_path`` joined with ``raw_path`` when a base path is configured
       (a relative base path is taken from ``workspace_root``, or from the
       current directory when there is no workspace root). With a base
       path this is the only candidate;
    3. the directory of ``document_path`` joined with ``raw_path``;
    4. ``workspace_root`` joined with ``raw_path``.
    """

    def __init__(self, exists: ExistsCheck) -> None:
        self.exists = exists

    def resolve(
        self,
        raw_path: str,
        document_path: str,
        workspace_root: str,
        base_path: str,
    ) -> Optional[str]:
        for candidate in self.candidates(raw_path, document_path, workspace_root, base_path):
            if self.exists(candidate):
                log_debug("resolver", "resolve.hit", {"path": raw_path, "resolved": candidate})
                return candidate
        log_debug("resolver", "resolve.miss", {"path": raw_path, "document": document_path})
        return None

    def candidates(
        self,
        raw_path: str,
        document_path: str,
        workspace_root: str,
        base_path: str,
    ) -> List[str]:
        """Return the paths ``resolve`` would test, in order."""
        if os.path.isabs(raw_path):
            return [raw_path]
        base = (base_path or "").strip()
        if base:
            if not os.path.isabs(base) and workspace_root:
                base = os.path.join(workspace_root, base)
            return [_join(base, raw_path)]
        candidates: List[str] = []
        if document_path:
            candidates.append(_join(os.path.dirname(document_path), raw_path))
        if workspace_root:
            candidates.append(_join(workspace_root, raw_path))
        return candidates


def resolve(
    raw_path: str,
    document_path: str,
    workspace_root: str,
    base_path: str,
    exists: ExistsCheck,
) -> Optional[str]:
    return PathResolver(exists).resolve(raw_path, document_path, workspace_root, base_path)


def _join(directory: str, raw_path: str) -> str:
    # abspath also normalises; a relative directory is taken from the cwd.
    return os.path.abspath(os.path.join(directory, raw_path))
