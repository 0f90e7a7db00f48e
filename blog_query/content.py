from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from .config_schema import AppConfig, CollectionConfig
from .errors import ContentError
from .event_log import EventLog

_FENCE = "---"
_FENCE_END = ("---", "...")
_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _FrontmatterLoader(yaml.SafeLoader):
    """SafeLoader that leaves timestamps as plain strings."""


_FrontmatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


@dataclass(frozen=True)
class ParsedDocument:
    frontmatter: Mapping[str, Any]
    body: str
    error: str | None = None


def parse_document(text: str) -> ParsedDocument:
    """
    Split a Markdown document into YAML frontmatter and body.

    Malformed frontmatter never raises: the document keeps an empty
    frontmatter mapping and `error` describes what went wrong.
    """
    source = (text or "").lstrip("\ufeff")
    lines = source.splitlines(keepends=True)

    if not lines or lines[0].strip() != _FENCE:
        return ParsedDocument(frontmatter={}, body=source)

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() in _FENCE_END:
            end = i
            break

    if end is None:
        return ParsedDocument(frontmatter={}, body=source, error="unterminated frontmatter block")

    block = "".join(lines[1:end])
    body = "".join(lines[end + 1 :])

    try:
        data = yaml.load(block, Loader=_FrontmatterLoader)
    except yaml.YAMLError as e:
        return ParsedDocument(frontmatter={}, body=body, error=f"invalid YAML: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        return ParsedDocument(frontmatter={}, body=body, error="frontmatter must be a mapping")

    return ParsedDocument(frontmatter=data, body=body)


def _glob_pattern(source: str) -> str:
    pattern = source.strip().strip("/")
    if pattern == "**" or pattern.endswith("/**"):
        pattern += "/*"
    return pattern


class ContentStore:
    """
    Read-only access to Markdown collections under a content root.

    `load` returns a fresh snapshot of raw records; callers normalize and
    query that snapshot without touching the store again.
    """

    def __init__(
        self,
        root: str | Path,
        collections: Mapping[str, CollectionConfig],
        *,
        log: EventLog | None = None,
    ) -> None:
        self._root = Path(root)
        self._collections = dict(collections)
        self._log = log or EventLog()

    @classmethod
    def from_config(
        cls, config: AppConfig, root: str | Path, *, log: EventLog | None = None
    ) -> "ContentStore":
        return cls(root, config.content.collections, log=log)

    @property
    def root(self) -> Path:
        return self._root

    def collection_names(self) -> list[str]:
        return sorted(self._collections)

    def files(self, collection: str) -> list[Path]:
        entry = self._collections.get(collection)
        if entry is None:
            known = ", ".join(self.collection_names())
            raise ContentError(f"Unknown collection: {collection} (known: {known})")

        if not self._root.is_dir():
            return []

        pattern = _glob_pattern(entry.source)
        return sorted(p for p in self._root.glob(pattern) if p.is_file())

    def load(self, collection: str) -> list[dict[str, Any]]:
        paths = self.files(collection)
        log = self._log.bind(collection=collection)
        records: list[dict[str, Any]] = []

        for path in paths:
            doc_id = path.relative_to(self._root).as_posix()
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise ContentError(f"Failed to read content file: {path}: {e}") from e

            parsed = parse_document(text)
            record: dict[str, Any] = {
                "id": doc_id,
                "frontmatter": dict(parsed.frontmatter),
                "body": parsed.body,
            }
            if parsed.error:
                record["_frontmatter_error"] = parsed.error
                log.warning("frontmatter_malformed", document=doc_id, reason=parsed.error)
            records.append(record)

        log.info("collection_loaded", documents=len(records))
        return records
