import unittest

from snippet_lens.config.manager import SnippetLensSettings
from snippet_lens.host import Document
from snippet_lens.models import PreviewMode
from snippet_lens.preview_manager import PreviewManager

from .fakes import FakeHost


class PreviewManagerTests(unittest.TestCase):
    def test_enabled_by_default(self) -> None:
        manager = PreviewManager(FakeHost())
        self.assertTrue(manager.is_enabled())
        manager.dispose()

    def test_toggle(self) -> None:
        manager = PreviewManager(FakeHost())
        self.assertFalse(manager.toggle())
        self.assertFalse(manager.is_enabled())
        self.assertTrue(manager.toggle())
        self.assertTrue(manager.is_enabled())

    def test_disabled_in_settings(self) -> None:
        manager = PreviewManager(FakeHost(), SnippetLensSettings(enabled=False))
        self.assertFalse(manager.is_enabled())
        self.assertEqual(manager.update_previews(Document('--8<-- "a.txt"')), [])

    def test_inline_previews_for_document(self) -> None:
        host = FakeHost(
            {
                "/docs/a.txt": "Line 1\nLine 2\nLine 3\nLine 4\nLine 5",
                "/docs/b.txt": "unreadable",
            }
        )
        host.unreadable.add("/docs/b.txt")
        settings = SnippetLensSettings(max_lines=3)
        manager = PreviewManager(host, settings, workspace_root="/ws")
        document = Document(
            '# Title\n\n--8<-- "a.txt"\n--8<-- "b.txt"\n--8<-- "c.txt"\n',
            path="/docs/index.md",
        )

        previews = manager.update_previews(document)

        self.assertEqual([p.location.path for p in previews], ["a.txt", "b.txt", "c.txt"])
        self.assertEqual(previews[0].resolved_path, "/docs/a.txt")
        self.assertEqual(previews[0].text, "Line 1 ⏎ Line 2 ⏎ Line 3 ⏎ ... (2 more lines)")
        self.assertEqual(previews[1].resolved_path, "/docs/b.txt")
        self.assertIsNone(previews[1].text)
        self.assertIsNone(previews[2].resolved_path)
        self.assertIsNone(previews[2].text)
        self.assertNotIn("/docs/c.txt", host.reads)

    def test_each_reference_is_resolved_once(self) -> None:
        host = FakeHost({"/docs/a.md": "snippet"})
        manager = PreviewManager(host)

        (preview,) = manager.update_previews(Document('--8<-- "a.md"', path="/docs/index.md"))

        self.assertEqual(host.exists_calls, ["/docs/a.md"])
        self.assertEqual(host.reads, ["/docs/a.md"])
        self.assertEqual(preview.resolved_path, "/docs/a.md")
        self.assertEqual(preview.text, "snippet")

    def test_block_mode(self) -> None:
        host = FakeHost({"/docs/a.txt": "Line 1\n\nLine 3\nLine 4"})
        manager = PreviewManager(host)
        manager.set_mode("block")
        self.assertIs(manager.mode, PreviewMode.BLOCK)
        (preview,) = manager.update_previews(Document('--8<-- "a.txt"\nMore content', path="/docs/x.md"))
        self.assertEqual(preview.text, "  Line 1\n  \n  Line 3\n  Line 4\n")

    def test_non_markdown_documents_are_skipped(self) -> None:
        manager = PreviewManager(FakeHost({"/docs/a.txt": "x"}))
        document = Document('--8<-- "a.txt"', path="/docs/notes.txt", language_id="plaintext")
        self.assertEqual(manager.update_previews(document), [])

    def test_disposed_manager_returns_nothing(self) -> None:
        manager = PreviewManager(FakeHost({"/docs/a.txt": "x"}))
        manager.dispose()
        self.assertEqual(manager.update_previews(Document('--8<-- "a.txt"', path="/docs/i.md")), [])


if __name__ == "__main__":
    unittest.main()
