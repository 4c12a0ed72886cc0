from __future__ import annotations

import argparse
import errno
import os
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..config.manager import ConfigManager, SnippetLensSettings
from ..config.paths import SnippetLensPaths
from ..core.session_log import SessionLogger, log_exception, set_active_logger
from ..detector import line_and_column
from ..diagnostics import DiagnosticManager
from ..host import MARKDOWN_SUFFIXES, Document, LocalFileHost
from ..links import SnippetLinkProvider
from ..models import PreviewMode, SnippetPreview
from ..preview_manager import PreviewManager
from ..resolver import PathResolver

SKIPPED_DIRS = {".git", ".venv", "venv", "node_modules", "site", "__pycache__", ".snippet-lens"}


class SnippetLensCLI:
    """Terminal host for snippet previews, links and diagnostics."""

    def __init__(
        self,
        root: Optional[Path] = None,
        *,
        console: Optional[Console] = None,
        overrides: Optional[dict] = None,
    ) -> None:
        self.root = Path(root or Path.cwd()).absolute()
        self.console = console or Console()
        self.paths = SnippetLensPaths(self.root)
        self.config = ConfigManager(self.paths, console=self.console)
        self.settings: SnippetLensSettings = self.config.load_settings().with_overrides(
            **(overrides or {})
        )
        self.logger = SessionLogger(self.paths, self.settings.debug)
        set_active_logger(self.logger)
        self.host = LocalFileHost()
        workspace_root = str(self.root)
        self.previews = PreviewManager(self.host, self.settings, workspace_root)
        self.diagnostics = DiagnosticManager(self.host, self.settings, workspace_root)
        self.links = SnippetLinkProvider(PathResolver(self.host.exists), self.settings, workspace_root)

    def collect_documents(self, targets: Sequence[str]) -> List[Path]:
        """Expand files and directories into markdown documents to scan."""
        documents: List[Path] = []
        for target in targets or [str(self.root)]:
            path = Path(target)
            if not path.is_absolute():
                path = Path.cwd() / path
            if path.is_dir():
                documents.extend(self._markdown_files(path))
            elif path.is_file():
                documents.append(path)
            else:
                self.console.print(f"[yellow]Skipping missing path: {escape(target)}[/yellow]")
        return documents

    def run_preview(self, targets: Sequence[str]) -> int:
        if not self.previews.is_enabled():
            self.console.print("[dim]Snippet previews are disabled in the configuration.[/dim]")
            return 0
        for document in self._load(targets):
            previews = self.previews.update_previews(document)
            if not previews:
                continue
            self.console.print(Text(self._display_path(document.path), style="bold cyan"))
            for preview in previews:
                self.render_preview(document, preview)
        return 0

    def render_preview(self, document: Document, preview: SnippetPreview) -> None:
        line, _ = line_and_column(document.text, preview.location.start_offset)
        label = Text(f"  L{line + 1} ", style="dim")
        label.append(preview.location.path, style="bold")
        if preview.resolved_path is None:
            label.append(f"  Snippet file not found: '{preview.location.path}'", style="red")
            self.console.print(label)
            return
        if preview.text is None:
            label.append("  no preview available", style="yellow")
            self.console.print(label)
            return
        if self.previews.mode is PreviewMode.BLOCK:
            self.console.print(label)
            self.console.print(
                Panel(
                    Text(preview.text.rstrip("\n")),
                    title=Text(self._display_path(preview.resolved_path)),
                    border_style="cyan",
                )
            )
            return
        label.append("  ")
        label.append(preview.text, style="italic")
        self.console.print(label)

    def run_check(self, targets: Sequence[str]) -> int:
        table = Table(title="Unresolved snippets")
        table.add_column("Location", style="cyan", no_wrap=True)
        table.add_column("Message", style="red")
        count = 0
        for document in self._load(targets):
            for diagnostic in self.diagnostics.update(document):
                count += 1
                where = f"{self._display_path(document.path)}:{diagnostic.line + 1}:{diagnostic.column + 1}"
                table.add_row(Text(where), Text(diagnostic.message))
        if not count:
            self.console.print("[green]All snippet references resolve.[/green]")
            return 0
        self.console.print(table)
        return 1

    def run_links(self, targets: Sequence[str]) -> int:
        table = Table(title="Snippet links")
        table.add_column("Document", style="cyan", no_wrap=True)
        table.add_column("Snippet", style="bold")
        table.add_column("Target", style="white")
        for document in self._load(targets):
            for link in self.links.provide_links(document):
                line, column = line_and_column(document.text, link.start_offset)
                table.add_row(
                    Text(f"{self._display_path(document.path)}:{line + 1}:{column + 1}"),
                    Text(link.location.path),
                    Text(self._display_path(link.target)),
                )
        if not table.row_count:
            self.console.print("[dim]No resolvable snippet references found.[/dim]")
            return 0
        self.console.print(table)
        return 0

    def run_init(self) -> int:
        created = self.config.create_config_template()
        verb = "Created" if created else "Updated"
        shown = escape(self._display_path(str(self.paths.config_file)))
        self.console.print(f"[green]{verb} {shown}[/green]")
        return 0

    def close(self) -> None:
        self.previews.dispose()
        self.logger.close()
        set_active_logger(None)

    def _load(self, targets: Sequence[str]) -> Iterable[Document]:
        for path in self.collect_documents(targets):
            try:
                yield Document.from_file(path)
            except OSError as exc:
                log_exception("cli", exc)
                self.console.print(f"[yellow]Cannot read {escape(str(path))}: {escape(str(exc))}[/yellow]")

    def _markdown_files(self, directory: Path) -> List[Path]:
        found: List[Path] = []
        for dirpath, dirnames, filenames in os.walk(directory):
            dirnames[:] = sorted(d for d in dirnames if d not in SKIPPED_DIRS)
            for name in sorted(filenames):
                if Path(name).suffix.lower() in MARKDOWN_SUFFIXES:
                    found.append(Path(dirpath) / name)
        return found

    def _display_path(self, path: str) -> str:
        try:
            return str(Path(path).relative_to(self.root))
        except ValueError:
            return path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snippet-lens",
        description="Preview and check MkDocs --8<-- snippet references",
    )
    parser.add_argument("-v", "--version", action="store_true", help="Show version and exit")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--root", help="Workspace root (defaults to the current directory)")
    common.add_argument("--base-path", dest="base_path", help="Directory snippets are resolved from")
    common.add_argument("--max-lines", dest="max_lines", type=int, help="Inline preview line limit")
    common.add_argument("--max-chars", dest="max_chars", type=int, help="Inline preview character limit")
    common.add_argument(
        "--mode",
        dest="preview_mode",
        choices=[m.value for m in PreviewMode],
        help="Preview rendering mode",
    )
    common.add_argument("--debug", action="store_true", help="Write a session log under .snippet-lens/logs")

    subparsers = parser.add_subparsers(dest="command")
    for name, help_text in (
        ("preview", "Show previews of every snippet reference"),
        ("check", "Report snippet references whose file cannot be found"),
        ("links", "List the files snippet references point to"),
    ):
        sub = subparsers.add_parser(name, parents=[common], help=help_text)
        sub.add_argument("paths", nargs="*", help="Markdown files or directories")
    subparsers.add_parser("init", parents=[common], help="Write .snippet-lens/config.json")
    interactive = subparsers.add_parser(
        "interactive", parents=[common], help="Browse snippet previews interactively"
    )
    interactive.add_argument("file", nargs="?", help="Markdown file to open")
    return parser


def _overrides(args: argparse.Namespace) -> dict:
    return {
        "base_path": getattr(args, "base_path", None),
        "max_lines": getattr(args, "max_lines", None),
        "max_chars": getattr(args, "max_chars", None),
        "preview_mode": getattr(args, "preview_mode", None),
        "debug": True if getattr(args, "debug", False) else None,
    }


def run(argv: Optional[Sequence[str]] = None, console: Optional[Console] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.version:
        from snippet_lens import __version__

        print(f"snippet-lens {__version__}")
        return 0
    if not args.command:
        parser.print_help()
        return 0
    root = Path(args.root) if args.root else None
    cli = SnippetLensCLI(root, console=console, overrides=_overrides(args))
    try:
        if args.command == "preview":
            return cli.run_preview(args.paths)
        if args.command == "check":
            return cli.run_check(args.paths)
        if args.command == "links":
            return cli.run_links(args.paths)
        if args.command == "init":
            return cli.run_init()
        from .interactive import InteractiveSession

        return InteractiveSession(cli, args.file).run()
    finally:
        cli.close()


def main() -> None:
    try:
        code = run()
    except BrokenPipeError:
        return
    except KeyboardInterrupt:
        return
    except OSError as exc:
        if exc.errno == errno.EPIPE:
            return
        log_exception("cli", exc)
        raise
    raise SystemExit(code)


if __name__ == "__main__":
    main()
