from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from .normalize import frontmatter_of
from .post import parse_post_date

_MISSING = object()


@dataclass(frozen=True)
class FrontmatterCheck:
    valid: bool
    problems: Sequence[str]


def _lookup(raw: Mapping[str, Any], field: str) -> Any:
    for source in (frontmatter_of(raw), raw):
        value = source.get(field, _MISSING)
        if value is not _MISSING and value is not None:
            return value
    return _MISSING


def _is_blank(value: Any) -> bool:
    if value is _MISSING:
        return True
    return isinstance(value, str) and not value.strip()


def check_frontmatter(raw: Any) -> FrontmatterCheck:
    """
    Report which fields of a raw content record would fall back to defaults.

    This never raises; a record that normalizes only through defaults is
    reported, not rejected.
    """
    record: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
    problems: list[str] = []

    if record.get("_frontmatter_error"):
        problems.append("malformed_frontmatter")

    if _is_blank(_lookup(record, "title")):
        problems.append("missing_title")

    if _is_blank(_lookup(record, "description")):
        problems.append("missing_description")

    date_value = _lookup(record, "date")
    if _is_blank(date_value):
        problems.append("missing_date")
    elif parse_post_date(date_value) is None:
        problems.append("invalid_date")

    tags = _lookup(record, "tags")
    if tags is not _MISSING:
        if not isinstance(tags, (list, tuple)) or not all(isinstance(t, str) for t in tags):
            problems.append("invalid_tags")

    draft = _lookup(record, "draft")
    if draft is not _MISSING and not isinstance(draft, bool):
        problems.append("invalid_draft")

    return FrontmatterCheck(valid=not problems, problems=tuple(problems))
