"""Preview rendering for resolved snippet files.

Two renderings are supported: ``inline`` squeezes the file into a single
line bounded by line and character budgets, ``block`` indents every line for
surfaces that can show multi-line text.
"""

from __future__ import annotations

import re
from typing import Callable, List, Optional, Union

from .core.session_log import log_exception
from .models import PreviewMode, SnippetLocation
from .resolver import PathResolver

LINE_MARKER = " ⏎ "
TRUNCATION_SUFFIX = "..."
BLOCK_INDENT = "  "

_LINE_SPLIT = re.compile(r"\r?\n")


def split_lines(content: str) -> List[str]:
    # "" splits into a single empty line.
    return _LINE_SPLIT.split(content)


def format_inline(content: str, max_lines: int, max_chars: int) -> str:
    """Render ``content`` on one line.

    Lines beyond ``max_lines`` are replaced by a "more lines" note, then the
    whole string (note included) is cut to ``max_chars`` characters followed
    by ``...``. A limit of zero or less disables that truncation.
    """
    if not content:
        return ""
    lines = split_lines(content)
    shown = lines if max_lines <= 0 else lines[:max_lines]
    text = LINE_MARKER.join(shown)
    remaining = len(lines) - len(shown)
    if remaining > 0:
        text += f"{LINE_MARKER}... ({remaining} more lines)"
    if max_chars > 0 and len(text) > max_chars:
        text = text[:max_chars] + TRUNCATION_SUFFIX
    return text


def format_block(content: str) -> str:
    lines = split_lines(content)
    return "\n".join(f"{BLOCK_INDENT}{line}" for line in lines) + "\n"


def render(
    content: str,
    max_lines: int,
    max_chars: int,
    mode: Union[PreviewMode, str] = PreviewMode.INLINE,
) -> str:
    preview_mode = PreviewMode(mode)
    if preview_mode is PreviewMode.BLOCK:
        return format_block(content)
    return format_inline(content, max_lines, max_chars)


def create_preview_content(
    location: SnippetLocation,
    document_path: str,
    workspace_root: str,
    base_path: str,
    max_lines: int,
    max_chars: int,
    resolver: PathResolver,
    read_file: Callable[[str], str],
    mode: Union[PreviewMode, str] = PreviewMode.INLINE,
) -> Optional[str]:
    """Resolve, read and render one snippet; ``None`` when there is nothing to show."""
    resolved = resolver.resolve(location.path, document_path, workspace_root, base_path)
    if not resolved:
        return None
    return render_resolved(resolved, max_lines, max_chars, read_file, mode)


def render_resolved(
    resolved_path: str,
    max_lines: int,
    max_chars: int,
    read_file: Callable[[str], str],
    mode: Union[PreviewMode, str] = PreviewMode.INLINE,
) -> Optional[str]:
    """Read and render an already resolved snippet; ``None`` if it cannot be read."""
    try:
        content = read_file(resolved_path)
    except Exception as exc:  # noqa: BLE001
        log_exception("preview", exc)
        return None
    return render(str(content), max_lines, max_chars, mode)
