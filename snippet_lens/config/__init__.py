"""Configuration package."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .manager import ConfigManager, SnippetLensSettings
    from .paths import SnippetLensPaths

__all__ = ["ConfigManager", "SnippetLensSettings", "SnippetLensPaths"]


def __getattr__(name: str) -> Any:
    if name in {"ConfigManager", "SnippetLensSettings"}:
        from .manager import ConfigManager, SnippetLensSettings

        return {"ConfigManager": ConfigManager, "SnippetLensSettings": SnippetLensSettings}[name]
    if name == "SnippetLensPaths":
        from .paths import SnippetLensPaths

        return SnippetLensPaths
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
