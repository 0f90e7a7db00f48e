from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any

DEFAULT_TITLE = "Untitled Post"
DEFAULT_DESCRIPTION = "No description available"
DEFAULT_DATE = "2024-01-01"
DEFAULT_AUTHOR = "Unknown Author"
DEFAULT_CATEGORY = "uncategorized"
DEFAULT_SLUG = "untitled"
DEFAULT_PUBLISHED_AT = datetime(2024, 1, 1, tzinfo=timezone.utc)


def parse_post_date(value: Any) -> datetime | None:
    """
    Parse an ISO-8601 date or datetime into an aware datetime.

    Naive values are read as UTC. Returns None when the value cannot be parsed.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        if s.endswith(("Z", "z")):
            s = s[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def body_text(body: Any) -> str:
    """Plain text of a post body; structured render trees are serialized to JSON."""
    if body is None:
        return ""
    if isinstance(body, str):
        return body
    return json.dumps(body, ensure_ascii=False, default=str)


@dataclass(frozen=True)
class Post:
    """A blog post with every metadata field defaulted."""

    id: str
    path: str
    title: str = DEFAULT_TITLE
    description: str = DEFAULT_DESCRIPTION
    date: str = DEFAULT_DATE
    author: str = DEFAULT_AUTHOR
    tags: tuple[str, ...] = ()
    category: str = DEFAULT_CATEGORY
    draft: bool = False
    body: Any = None

    @property
    def slug(self) -> str:
        return self.path.rstrip("/").rsplit("/", 1)[-1] or DEFAULT_SLUG

    @property
    def published_at(self) -> datetime:
        parsed = parse_post_date(self.date)
        return parsed if parsed is not None else DEFAULT_PUBLISHED_AT

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "_path": self.path,
            "title": self.title,
            "description": self.description,
            "date": self.date,
            "author": self.author,
            "tags": list(self.tags),
            "category": self.category,
            "draft": self.draft,
            "body": self.body,
        }
