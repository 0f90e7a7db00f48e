from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .aggregates import unique_categories, unique_tags
from .errors import PostNotFoundError
from .filters import filter_posts, is_published
from .normalize import normalize_posts
from .paginate import paginate
from .post import Post
from .sorting import SortKey, sort_posts


class PostQuery(BaseModel):
    """Parameters for one listing request over a collection snapshot."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    search: str | None = None
    search_body: bool = False
    category: str | None = None
    author: str | None = None
    tag: str | None = None
    any_tags: tuple[str, ...] = ()
    date_from: str | None = None
    date_to: str | None = None
    include_drafts: bool = False
    sort: SortKey = "date-desc"
    limit: int | None = None
    skip: int = Field(0, ge=0)

    @field_validator("any_tags")
    @classmethod
    def _drop_blank_tags(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(t for t in v if (t or "").strip())


@dataclass(frozen=True)
class QueryResult:
    posts: Sequence[Post]
    total: int
    categories: Sequence[str]
    tags: Sequence[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "count": len(self.posts),
            "categories": list(self.categories),
            "tags": list(self.tags),
            "posts": [p.to_dict() for p in self.posts],
        }


def run_query(records: Iterable[Any], query: PostQuery | None = None) -> QueryResult:
    """
    Normalize a collection snapshot, then filter, sort, and paginate it.

    Categories and tags are collected over every post the query may show
    (drafts only when `include_drafts` is set), before the other filters, so
    filter options do not disappear as filters are applied.
    """
    q = query or PostQuery()
    posts = normalize_posts(records)
    visible = [p for p in posts if q.include_drafts or is_published(p)]

    matched = filter_posts(
        posts,
        search=q.search,
        search_body=q.search_body,
        category=q.category,
        author=q.author,
        tag=q.tag,
        any_tags=q.any_tags,
        date_from=q.date_from,
        date_to=q.date_to,
        include_drafts=q.include_drafts,
    )
    ordered = sort_posts(matched, q.sort)

    if q.limit is None:
        page = ordered[q.skip :]
    else:
        page = paginate(ordered, q.limit, q.skip)

    return QueryResult(
        posts=tuple(page),
        total=len(ordered),
        categories=tuple(unique_categories(visible)),
        tags=tuple(unique_tags(visible)),
    )


def find_post(posts: Iterable[Post], slug: str) -> Post:
    wanted = (slug or "").strip().strip("/")
    for post in posts:
        if post.slug == wanted:
            return post
    raise PostNotFoundError(wanted)


def adjacent_posts(
    posts: Iterable[Post], slug: str, *, sort: str = "date-desc"
) -> tuple[Post | None, Post | None]:
    """
    Return the posts listed immediately before and after `slug`.

    Raises PostNotFoundError when `slug` is not in the collection.
    """
    ordered = sort_posts(posts, sort)
    wanted = find_post(ordered, slug).slug
    idx = next(i for i, p in enumerate(ordered) if p.slug == wanted)

    previous = ordered[idx - 1] if idx > 0 else None
    following = ordered[idx + 1] if idx + 1 < len(ordered) else None
    return previous, following
