from __future__ import annotations

from typing import Any, Iterable, Sequence

from .post import Post, body_text, parse_post_date


def matches_search(post: Post, query: str | None, *, include_body: bool = False) -> bool:
    """
    Case-insensitive substring match over title, description, tags, and author.

    With `include_body`, the body text is searched as well. A blank query
    matches every post.
    """
    term = (query or "").strip().casefold()
    if not term:
        return True

    if term in post.title.casefold():
        return True
    if term in post.description.casefold():
        return True
    if any(term in tag.casefold() for tag in post.tags):
        return True
    if term in post.author.casefold():
        return True
    return include_body and term in body_text(post.body).casefold()


def matches_category(post: Post, category: str) -> bool:
    return post.category == category


def matches_author(post: Post, author: str) -> bool:
    return post.author == author


def matches_tag(post: Post, tag: str) -> bool:
    return tag in post.tags


def matches_any_tag(post: Post, tags: Sequence[str]) -> bool:
    if not tags:
        return True
    return any(tag in post.tags for tag in tags)


def matches_date_range(post: Post, start: Any = None, end: Any = None) -> bool:
    """Inclusive chronological bounds; a bound that does not parse is ignored."""
    published = post.published_at

    lower = parse_post_date(start) if start is not None else None
    if lower is not None and published < lower:
        return False

    upper = parse_post_date(end) if end is not None else None
    if upper is not None and published > upper:
        return False

    return True


def is_published(post: Post) -> bool:
    return not post.draft


def filter_posts_by_search(
    posts: Iterable[Post], query: str | None, *, include_body: bool = False
) -> list[Post]:
    return [p for p in posts if matches_search(p, query, include_body=include_body)]


def filter_posts_by_category(posts: Iterable[Post], category: str) -> list[Post]:
    return [p for p in posts if matches_category(p, category)]


def filter_posts_by_tag(posts: Iterable[Post], tag: str) -> list[Post]:
    return [p for p in posts if matches_tag(p, tag)]


def filter_posts(
    posts: Iterable[Post],
    *,
    search: str | None = None,
    search_body: bool = False,
    category: str | None = None,
    author: str | None = None,
    tag: str | None = None,
    any_tags: Sequence[str] = (),
    date_from: Any = None,
    date_to: Any = None,
    include_drafts: bool = True,
) -> list[Post]:
    """Keep posts that satisfy every supplied predicate."""
    out: list[Post] = []
    for post in posts:
        if not include_drafts and not is_published(post):
            continue
        if not matches_search(post, search, include_body=search_body):
            continue
        if category is not None and not matches_category(post, category):
            continue
        if author is not None and not matches_author(post, author):
            continue
        if tag is not None and not matches_tag(post, tag):
            continue
        if not matches_any_tag(post, any_tags):
            continue
        if not matches_date_range(post, date_from, date_to):
            continue
        out.append(post)
    return out
