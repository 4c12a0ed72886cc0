"""Command line interface for Snippet Lens."""

from .app import SnippetLensCLI, build_parser, main, run

__all__ = ["SnippetLensCLI", "build_parser", "main", "run"]
