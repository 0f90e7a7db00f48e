from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Iterable, Mapping

from .post import (
    DEFAULT_AUTHOR,
    DEFAULT_CATEGORY,
    DEFAULT_DATE,
    DEFAULT_DESCRIPTION,
    DEFAULT_SLUG,
    DEFAULT_TITLE,
    Post,
    parse_post_date,
)

# Keys that may hold the document's frontmatter, in priority order.
FRONTMATTER_KEYS: tuple[str, ...] = ("frontmatter", "meta")

# Where each field is looked up, in priority order, before its default applies.
FIELD_SOURCES: tuple[str, ...] = ("frontmatter", "record")

CONTENT_SUFFIXES: tuple[str, ...] = (".md", ".markdown")

_MISSING = object()


def _coerce_text(value: Any) -> str | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        s = value.strip()
        return s if s else None
    return None


def _coerce_name(value: Any) -> str | None:
    if isinstance(value, str):
        s = value.strip()
        return s if s else None
    return None


def _coerce_date(value: Any) -> str | None:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str) and parse_post_date(value) is not None:
        return value.strip()
    return None


def _coerce_tags(value: Any) -> tuple[str, ...] | None:
    if not isinstance(value, (list, tuple)):
        return None

    out: list[str] = []
    seen: set[str] = set()
    for item in value:
        if not isinstance(item, str):
            continue
        tag = item.strip()
        if not tag or tag in seen:
            continue
        seen.add(tag)
        out.append(tag)
    return tuple(out)


def _coerce_draft(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    return None


def frontmatter_of(raw: Mapping[str, Any]) -> Mapping[str, Any]:
    for key in FRONTMATTER_KEYS:
        candidate = raw.get(key)
        if isinstance(candidate, Mapping):
            return candidate
    return {}


def _sources(raw: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    by_name = {"frontmatter": frontmatter_of(raw), "record": raw}
    return [by_name[name] for name in FIELD_SOURCES]


def resolve_field(
    raw: Mapping[str, Any],
    field: str,
    coerce: Callable[[Any], Any],
    default: Any = None,
) -> Any:
    """
    Return the first coercible value for `field` across FIELD_SOURCES.

    A candidate that is missing or fails coercion is skipped, so a bad
    frontmatter value falls through to the top-level record and then to `default`.
    """
    for source in _sources(raw):
        candidate = source.get(field, _MISSING)
        if candidate is _MISSING or candidate is None:
            continue
        coerced = coerce(candidate)
        if coerced is not None:
            return coerced
    return default


def slug_from_id(post_id: str) -> str:
    segment = (post_id or "").strip().rsplit("/", 1)[-1]
    for suffix in CONTENT_SUFFIXES:
        if segment.endswith(suffix):
            segment = segment[: -len(suffix)]
            break
    segment = segment.strip()
    return segment if segment else DEFAULT_SLUG


def normalize_post(raw: Any) -> Post:
    """
    Build a fully-defaulted Post from a loosely-typed content record.

    Never raises: anything missing or mistyped is replaced by its default.
    """
    record: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}

    post_id = _coerce_text(record.get("id")) or ""
    slug = slug_from_id(post_id)

    return Post(
        id=post_id,
        path=f"/blog/{slug}",
        title=resolve_field(record, "title", _coerce_text, DEFAULT_TITLE),
        description=resolve_field(record, "description", _coerce_text, DEFAULT_DESCRIPTION),
        date=resolve_field(record, "date", _coerce_date, DEFAULT_DATE),
        author=resolve_field(record, "author", _coerce_name, DEFAULT_AUTHOR),
        tags=resolve_field(record, "tags", _coerce_tags, ()),
        category=resolve_field(record, "category", _coerce_name, DEFAULT_CATEGORY),
        draft=resolve_field(record, "draft", _coerce_draft, False),
        body=record.get("body"),
    )


def normalize_posts(records: Iterable[Any]) -> list[Post]:
    out: list[Post] = []
    for item in records:
        if isinstance(item, Post):
            out.append(item)
        else:
            out.append(normalize_post(item))
    return out
