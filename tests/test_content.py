from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from blog_query.config_schema import CollectionConfig
from blog_query.content import ContentStore, parse_document
from blog_query.errors import ContentError
from blog_query.event_log import EventLog
from blog_query.normalize import normalize_post, normalize_posts

_GOOD = """\
---
title: Getting Started with Nuxt
description: A tour
date: 2024-01-15
tags: [nuxt, vue]
category: tutorial
---
# Hello

Some body text.
"""

_BAD_YAML = """\
---
title: [unclosed
---
Body survives.
"""


def _write(root: Path, rel: str, text: str) -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


class TestParseDocument(unittest.TestCase):
    def test_splits_frontmatter_and_body(self) -> None:
        doc = parse_document(_GOOD)
        self.assertIsNone(doc.error)
        self.assertEqual(doc.frontmatter["title"], "Getting Started with Nuxt")
        self.assertTrue(doc.body.startswith("# Hello"))

    def test_no_frontmatter(self) -> None:
        doc = parse_document("# Just markdown\n")
        self.assertEqual(dict(doc.frontmatter), {})
        self.assertIsNone(doc.error)
        self.assertEqual(doc.body, "# Just markdown\n")

    def test_malformed_yaml_degrades(self) -> None:
        doc = parse_document(_BAD_YAML)
        self.assertEqual(dict(doc.frontmatter), {})
        self.assertIsNotNone(doc.error)
        self.assertEqual(doc.body, "Body survives.\n")

    def test_unterminated_block(self) -> None:
        doc = parse_document("---\ntitle: x\n")
        self.assertEqual(doc.error, "unterminated frontmatter block")

    def test_non_mapping_frontmatter(self) -> None:
        doc = parse_document("---\n- a\n- b\n---\nbody\n")
        self.assertEqual(doc.error, "frontmatter must be a mapping")

    def test_impossible_date_only_resets_the_date(self) -> None:
        doc = parse_document(
            "---\ntitle: Hello World\ncategory: tutorial\ndate: 2024-02-30\n---\nbody\n"
        )
        self.assertIsNone(doc.error)

        post = normalize_post({"id": "blog/hello.md", "frontmatter": doc.frontmatter})
        self.assertEqual(post.title, "Hello World")
        self.assertEqual(post.category, "tutorial")
        self.assertEqual(post.date, "2024-01-01")

    def test_dates_stay_strings(self) -> None:
        doc = parse_document("---\ndate: 2024-01-15\nupdated: 2024-01-16T10:00:00Z\n---\n")
        self.assertEqual(doc.frontmatter["date"], "2024-01-15")
        self.assertEqual(doc.frontmatter["updated"], "2024-01-16T10:00:00Z")


class TestContentStore(unittest.TestCase):
    def _store(self, root: Path, log: EventLog | None = None) -> ContentStore:
        return ContentStore(
            root,
            {
                "blog": CollectionConfig(source="blog/**/*.md"),
                "docs": CollectionConfig(source="**"),
            },
            log=log,
        )

    def test_loads_collection_records(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            _write(root, "blog/getting-started-with-nuxt.md", _GOOD)
            _write(root, "blog/2024/nested.md", "---\ntitle: Nested\n---\n")
            _write(root, "blog/notes.txt", "ignored")
            _write(root, "pages/about.md", "# About\n")

            records = self._store(root).load("blog")

            self.assertEqual(
                [r["id"] for r in records],
                ["blog/2024/nested.md", "blog/getting-started-with-nuxt.md"],
            )
            posts = normalize_posts(records)
            self.assertEqual(posts[1].date, "2024-01-15")
            self.assertEqual(posts[1].tags, ("nuxt", "vue"))
            self.assertEqual(posts[0].slug, "nested")

    def test_double_star_source_lists_files(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            _write(root, "blog/a.md", _GOOD)
            _write(root, "pages/about.md", "# About\n")

            ids = [r["id"] for r in self._store(root).load("docs")]
            self.assertEqual(ids, ["blog/a.md", "pages/about.md"])

    def test_missing_root_is_empty(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            store = self._store(Path(td) / "nope")
            self.assertEqual(store.load("blog"), [])

    def test_unknown_collection(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(ContentError):
                self._store(Path(td)).load("nonexistent")

    def test_malformed_frontmatter_is_logged_and_defaulted(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td) / "content"
            log_path = Path(td) / "events.log"
            _write(root, "blog/broken.md", _BAD_YAML)

            with EventLog.open(log_path) as log:
                records = self._store(root, log).load("blog")

            self.assertIn("_frontmatter_error", records[0])
            post = normalize_posts(records)[0]
            self.assertEqual(post.title, "Untitled Post")
            self.assertEqual(post.body, "Body survives.\n")

            events = [
                json.loads(ln)["event"]
                for ln in log_path.read_text(encoding="utf-8").splitlines()
                if ln.strip()
            ]
            self.assertEqual(events, ["frontmatter_malformed", "collection_loaded"])


if __name__ == "__main__":
    unittest.main()
