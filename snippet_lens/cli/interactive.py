from __future__ import annotations

import shlex
from pathlib import Path
from typing import Iterable, List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document as PromptDocument
from prompt_toolkit.history import FileHistory
from rich.markup import escape

from ..host import MARKDOWN_SUFFIXES, Document
from ..models import PreviewMode
from .app import SnippetLensCLI

INTERACTIVE_COMMANDS = ["/open", "/toggle", "/mode", "/check", "/help", "/exit"]

HELP_TEXT = (
    "/open <file>   open a markdown document and show its previews\n"
    "/toggle        turn previews on or off\n"
    "/mode <mode>   switch between inline and block previews\n"
    "/check         list unresolved snippets of the open document\n"
    "/exit          leave the session"
)


class SnippetLensCompleter(Completer):
    """Suggests commands, preview modes and markdown paths while typing."""

    def __init__(self, root: Path, commands: List[str], max_files: int = 200) -> None:
        self.root = root
        self.commands = commands
        self.max_files = max_files

    def get_completions(self, document: PromptDocument, complete_event):  # type: ignore[override]
        text = document.text_before_cursor
        if not text.startswith("/"):
            return
        tokens = text.split()
        if len(tokens) <= 1 and not text.endswith(" "):
            command = tokens[0] if tokens else ""
            for cmd in self.commands:
                if cmd.startswith(command):
                    yield Completion(cmd, start_position=-len(command))
            return
        command = tokens[0]
        prefix = "" if text.endswith(" ") else tokens[-1]
        if command == "/mode":
            options: Iterable[str] = [m.value for m in PreviewMode]
        elif command == "/open":
            options = self._markdown_candidates()
        else:
            return
        for option in options:
            if option.startswith(prefix):
                yield Completion(option, start_position=-len(prefix))

    def _markdown_candidates(self) -> List[str]:
        candidates: List[str] = []
        for path in sorted(self.root.rglob("*")):
            if len(candidates) >= self.max_files:
                break
            if not path.is_file() or path.suffix.lower() not in MARKDOWN_SUFFIXES:
                continue
            rel = path.relative_to(self.root)
            if any(part.startswith(".") or part in {"site", "node_modules"} for part in rel.parts):
                continue
            candidates.append(rel.as_posix())
        return candidates


class InteractiveSession:
    """Small command loop that mimics the editor's preview commands."""

    def __init__(self, cli: SnippetLensCLI, file: Optional[str] = None) -> None:
        self.cli = cli
        self.console = cli.console
        self.document: Optional[Document] = None
        self.initial_file = file

    def run(self) -> int:
        if self.initial_file:
            self.open(self.initial_file)
        self.cli.paths.lens_dir.mkdir(parents=True, exist_ok=True)
        session = PromptSession(
            completer=SnippetLensCompleter(self.cli.root, INTERACTIVE_COMMANDS),
            history=FileHistory(str(self.cli.paths.lens_dir / "history")),
        )
        while True:
            try:
                line = session.prompt("snippet-lens> ")
            except (EOFError, KeyboardInterrupt):
                return 0
            if not self.handle_command(line):
                return 0

    def handle_command(self, line: str) -> bool:
        """Execute one command line; False ends the session."""
        try:
            tokens = shlex.split(line)
        except ValueError as exc:
            self.console.print(f"[yellow]{escape(str(exc))}[/yellow]")
            return True
        if not tokens:
            return True
        command, args = tokens[0], tokens[1:]
        if command == "/exit":
            return False
        if command == "/help":
            self.console.print(HELP_TEXT, markup=False)
        elif command == "/open":
            if not args:
                self.console.print("[yellow]Usage: /open <file>[/yellow]")
            else:
                self.open(args[0])
        elif command == "/toggle":
            enabled = self.cli.previews.toggle()
            self.console.print(f"Previews {'enabled' if enabled else 'disabled'}.")
            self.show()
        elif command == "/mode":
            self.set_mode(args[0] if args else "")
        elif command == "/check":
            self.check()
        else:
            self.console.print(f"[yellow]Unknown command: {escape(command)}[/yellow]")
        return True

    def open(self, target: str) -> None:
        path = Path(target)
        if not path.is_absolute():
            path = self.cli.root / path
        try:
            self.document = Document.from_file(path)
        except OSError as exc:
            self.console.print(f"[yellow]Cannot open {escape(target)}: {escape(str(exc))}[/yellow]")
            return
        self.show()

    def set_mode(self, value: str) -> None:
        try:
            mode = self.cli.previews.set_mode(value.strip().lower())
        except ValueError:
            self.console.print("[yellow]Usage: /mode inline|block[/yellow]")
            return
        self.console.print(f"Preview mode: {mode.value}")
        self.show()

    def show(self) -> None:
        if self.document is None:
            return
        previews = self.cli.previews.update_previews(self.document)
        if not previews:
            if self.cli.previews.is_enabled():
                self.console.print("[dim]No snippet references in this document.[/dim]")
            return
        for preview in previews:
            self.cli.render_preview(self.document, preview)

    def check(self) -> None:
        if self.document is None:
            self.console.print("[yellow]Open a document first with /open <file>.[/yellow]")
            return
        diagnostics = self.cli.diagnostics.update(self.document)
        if not diagnostics:
            self.console.print("[green]All snippet references resolve.[/green]")
            return
        for diagnostic in diagnostics:
            self.console.print(
                f"L{diagnostic.line + 1}:{diagnostic.column + 1} {diagnostic.message}",
                style="red",
                markup=False,
            )
