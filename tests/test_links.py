import unittest

from snippet_lens.host import Document
from snippet_lens.links import SnippetLinkProvider
from snippet_lens.resolver import PathResolver


class SnippetLinkProviderTests(unittest.TestCase):
    def test_links_cover_quoted_path(self) -> None:
        resolver = PathResolver(lambda path: path == "/docs/inc/a.md")
        provider = SnippetLinkProvider(resolver, workspace_root="/ws")
        text = 'See:\n--8<-- "inc/a.md"\n--8<-- "missing.md"'

        links = provider.provide_links(Document(text, path="/docs/index.md"))

        self.assertEqual(len(links), 1)
        link = links[0]
        self.assertEqual(link.target, "/docs/inc/a.md")
        self.assertEqual(text[link.start_offset : link.end_offset], "inc/a.md")

    def test_no_links_for_plaintext(self) -> None:
        provider = SnippetLinkProvider(PathResolver(lambda _: True))
        document = Document('--8<-- "a.md"', path="/docs/a.txt", language_id="plaintext")
        self.assertEqual(provider.provide_links(document), [])


if __name__ == "__main__":
    unittest.main()
