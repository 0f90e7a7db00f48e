from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from blog_query.config import config_sha256, load_config, resolve_content_root
from blog_query.config_schema import AppConfig
from blog_query.errors import ConfigError


_VALID_YAML = """\
content:
  root: site/content
  collections:
    blog:
      source: "blog/**/*.md"
    pages:
      source: "pages/**/*.md"

listing:
  page_size: 2
  default_sort: title-asc
  include_drafts: false

reading:
  words_per_minute: 250

site:
  name: Dev Blog
  url: https://example.com/
  default_image: /images/cover.png
"""


class TestConfig(unittest.TestCase):
    def test_load_config_ok(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "config.yaml"
            path.write_text(_VALID_YAML, encoding="utf-8")

            cfg = load_config(path)
            self.assertEqual(cfg.listing.page_size, 2)
            self.assertEqual(cfg.listing.default_sort, "title-asc")
            self.assertEqual(cfg.reading.words_per_minute, 250)
            self.assertEqual(cfg.site.url, "https://example.com")
            self.assertEqual(cfg.content.collections["blog"].source, "blog/**/*.md")

    def test_empty_file_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "config.yaml"
            path.write_text("", encoding="utf-8")

            cfg = load_config(path)
            self.assertEqual(cfg, AppConfig())
            self.assertEqual(sorted(cfg.content.collections), ["blog", "docs", "pages"])

    def test_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(ConfigError):
                load_config(Path(td) / "missing.yaml")

    def test_rejects_invalid_values(self) -> None:
        cases = [
            _VALID_YAML.replace("page_size: 2", "page_size: 0"),
            _VALID_YAML.replace("default_sort: title-asc", "default_sort: popularity"),
            _VALID_YAML.replace("url: https://example.com/", "url: example.com"),
            _VALID_YAML.replace('"pages/**/*.md"', '"../outside/*.md"'),
            _VALID_YAML + "\nunknown_section: {}\n",
            "- just\n- a list\n",
            "listing: [unclosed\n",
        ]
        for text in cases:
            with tempfile.TemporaryDirectory() as td:
                path = Path(td) / "config.yaml"
                path.write_text(text, encoding="utf-8")
                with self.assertRaises(ConfigError, msg=text):
                    load_config(path)

    def test_error_message_names_location(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "config.yaml"
            path.write_text(_VALID_YAML.replace("page_size: 2", "page_size: 0"), encoding="utf-8")
            with self.assertRaises(ConfigError) as cm:
                load_config(path)
            self.assertIn("listing.page_size", str(cm.exception))

    def test_content_root_is_relative_to_config(self) -> None:
        cfg = AppConfig.model_validate({"content": {"root": "site/content"}})
        self.assertEqual(
            resolve_content_root(cfg, Path("/srv/blog/config.yaml")),
            Path("/srv/blog/site/content"),
        )
        self.assertEqual(resolve_content_root(cfg), Path("site/content"))

    def test_config_hash_is_stable(self) -> None:
        self.assertEqual(config_sha256(AppConfig()), config_sha256(AppConfig()))
        other = AppConfig.model_validate({"listing": {"page_size": 3}})
        self.assertNotEqual(config_sha256(AppConfig()), config_sha256(other))


if __name__ == "__main__":
    unittest.main()
