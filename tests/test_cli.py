import io
import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from rich.console import Console

from snippet_lens.cli import SnippetLensCLI, build_parser, run
from snippet_lens.core import session_log


def make_console() -> tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(file=buf, force_terminal=False, color_system=None, width=200), buf


class CLITestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._home = tempfile.TemporaryDirectory()
        self._env = mock.patch.dict(os.environ, {"HOME": self._home.name})
        self._env.start()
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        docs = self.root / "docs"
        (docs / "guide").mkdir(parents=True)
        (self.root / "snippets").mkdir()
        (docs / "guide" / "local.txt").write_text("Local 1\nLocal 2", encoding="utf-8")
        (self.root / "snippets" / "shared.txt").write_text(
            "Line 1\nLine 2\nLine 3\nLine 4\nLine 5", encoding="utf-8"
        )
        (docs / "guide" / "page.md").write_text(
            '# Page\n\n--8<-- "local.txt"\n--8<-- "snippets/shared.txt"\n--8<-- "missing.txt"\n',
            encoding="utf-8",
        )
        (docs / "clean.md").write_text('--8<-- "guide/local.txt"\n', encoding="utf-8")
        (docs / "notes.txt").write_text('--8<-- "missing.txt"\n', encoding="utf-8")

    def tearDown(self) -> None:
        session_log.set_active_logger(None)
        self._tmp.cleanup()
        self._env.stop()
        self._home.cleanup()


class PreviewCommandTests(CLITestCase):
    def test_inline_previews(self) -> None:
        console, buf = make_console()
        code = run(["preview", "--root", str(self.root), "--max-lines", "3"], console=console)
        output = buf.getvalue()
        self.assertEqual(code, 0)
        self.assertIn("docs/guide/page.md", output)
        self.assertIn("L3 local.txt  Local 1 ⏎ Local 2", output)
        self.assertIn("Line 1 ⏎ Line 2 ⏎ Line 3 ⏎ ... (2 more lines)", output)
        self.assertIn("Snippet file not found: 'missing.txt'", output)
        self.assertNotIn("notes.txt", output)

    def test_block_previews(self) -> None:
        console, buf = make_console()
        target = str(self.root / "docs" / "clean.md")
        code = run(["preview", "--root", str(self.root), "--mode", "block", target], console=console)
        output = buf.getvalue()
        self.assertEqual(code, 0)
        self.assertIn("docs/guide/local.txt", output)
        self.assertIn("Local 1", output)
        self.assertIn("Local 2", output)

    def test_disabled_previews(self) -> None:
        lens_dir = self.root / ".snippet-lens"
        lens_dir.mkdir()
        (lens_dir / "config.json").write_text(json.dumps({"enabled": False}), encoding="utf-8")
        console, buf = make_console()
        code = run(["preview", "--root", str(self.root)], console=console)
        self.assertEqual(code, 0)
        self.assertIn("disabled", buf.getvalue())

    def test_missing_target_is_skipped(self) -> None:
        console, buf = make_console()
        code = run(["preview", "--root", str(self.root), str(self.root / "nope.md")], console=console)
        self.assertEqual(code, 0)
        self.assertIn("Skipping missing path", buf.getvalue())

    def test_missing_target_with_markup_characters(self) -> None:
        console, buf = make_console()
        target = str(self.root / "a[/b].md")
        code = run(["check", "--root", str(self.root), target], console=console)
        self.assertEqual(code, 0)
        self.assertIn(f"Skipping missing path: {target}", buf.getvalue())


class CheckCommandTests(CLITestCase):
    def test_reports_unresolved_and_fails(self) -> None:
        console, buf = make_console()
        code = run(["check", "--root", str(self.root)], console=console)
        output = buf.getvalue()
        self.assertEqual(code, 1)
        self.assertIn("docs/guide/page.md:5:1", output)
        self.assertIn("Snippet file not found: 'missing.txt'", output)
        self.assertNotIn("notes.txt", output)

    def test_clean_document_passes(self) -> None:
        console, buf = make_console()
        target = str(self.root / "docs" / "clean.md")
        code = run(["check", "--root", str(self.root), target], console=console)
        self.assertEqual(code, 0)
        self.assertIn("All snippet references resolve.", buf.getvalue())

    def test_base_path_changes_resolution(self) -> None:
        console, buf = make_console()
        target = str(self.root / "docs" / "clean.md")
        code = run(["check", "--root", str(self.root), "--base-path", "snippets", target], console=console)
        self.assertEqual(code, 1)
        self.assertIn("guide/local.txt", buf.getvalue())

    def test_snippet_path_with_markup_characters(self) -> None:
        (self.root / "docs" / "odd.md").write_text('--8<-- "x[/bold].txt"\n', encoding="utf-8")
        console, buf = make_console()
        target = str(self.root / "docs" / "odd.md")
        code = run(["check", "--root", str(self.root), target], console=console)
        self.assertEqual(code, 1)
        self.assertIn("Snippet file not found: 'x[/bold].txt'", buf.getvalue())


class LinksAndInitTests(CLITestCase):
    def test_links(self) -> None:
        console, buf = make_console()
        code = run(["links", "--root", str(self.root)], console=console)
        output = buf.getvalue()
        self.assertEqual(code, 0)
        self.assertIn("snippets/shared.txt", output)
        self.assertIn("docs/guide/local.txt", output)
        self.assertNotIn("missing.txt", output)

    def test_init_writes_config(self) -> None:
        console, buf = make_console()
        code = run(["init", "--root", str(self.root)], console=console)
        self.assertEqual(code, 0)
        data = json.loads((self.root / ".snippet-lens" / "config.json").read_text(encoding="utf-8"))
        self.assertEqual(data["max_lines"], 20)
        self.assertIn("Created", buf.getvalue())

    def test_debug_flag_writes_session_log(self) -> None:
        console, _ = make_console()
        run(["check", "--root", str(self.root), "--debug"], console=console)
        logs = list((self.root / ".snippet-lens" / "logs").glob("snippet_lens_session_*.md"))
        self.assertEqual(len(logs), 1)
        self.assertIn("snippet.unresolved", logs[0].read_text(encoding="utf-8"))


class ParserTests(unittest.TestCase):
    def test_common_options(self) -> None:
        args = build_parser().parse_args(
            ["preview", "--mode", "block", "--max-chars", "50", "docs"]
        )
        self.assertEqual(args.command, "preview")
        self.assertEqual(args.preview_mode, "block")
        self.assertEqual(args.max_chars, 50)
        self.assertEqual(args.paths, ["docs"])

    def test_rejects_unknown_mode(self) -> None:
        with mock.patch("sys.stderr", new_callable=io.StringIO):
            with self.assertRaises(SystemExit):
                build_parser().parse_args(["preview", "--mode", "sideways"])

    def test_version(self) -> None:
        with mock.patch("sys.stdout", new_callable=io.StringIO) as out:
            self.assertEqual(run(["--version"]), 0)
        self.assertTrue(out.getvalue().startswith("snippet-lens "))

    def test_cli_close_clears_active_logger(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            console, _ = make_console()
            cli = SnippetLensCLI(Path(tmp), console=console)
            self.assertIs(session_log.get_active_logger(), cli.logger)
            cli.close()
            self.assertIsNone(session_log.get_active_logger())


if __name__ == "__main__":
    unittest.main()
