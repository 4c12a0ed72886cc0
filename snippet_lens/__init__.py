"""Snippet Lens package initialization."""

from importlib.metadata import version

__all__ = [
    "cli",
    "config",
    "detector",
    "diagnostics",
    "host",
    "links",
    "models",
    "preview",
    "preview_manager",
    "resolver",
]

# Single source of truth comes from package metadata defined in pyproject.toml
__version__ = version("snippet-lens")
