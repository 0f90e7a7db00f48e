from __future__ import annotations

from collections import Counter
from typing import Iterable

from .post import Post


def unique_categories(posts: Iterable[Post]) -> list[str]:
    return sorted({p.category for p in posts if p.category})


def unique_tags(posts: Iterable[Post]) -> list[str]:
    return sorted({tag for p in posts for tag in p.tags})


def category_counts(posts: Iterable[Post]) -> list[tuple[str, int]]:
    counts = Counter(p.category for p in posts if p.category)
    return sorted(counts.items())


def tag_counts(posts: Iterable[Post]) -> list[tuple[str, int]]:
    counts: Counter[str] = Counter()
    for post in posts:
        counts.update(post.tags)
    return sorted(counts.items())
