from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")


def paginate(posts: Sequence[T], limit: int, skip: int = 0) -> list[T]:
    """
    Return at most `limit` items starting at offset `skip`.

    A non-positive limit yields an empty list; a negative skip counts as zero.
    """
    if limit <= 0:
        return []
    start = max(0, int(skip))
    return list(posts[start : start + int(limit)])


def page_count(total: int, per_page: int) -> int:
    if per_page <= 0:
        raise ValueError("per_page must be positive")
    if total <= 0:
        return 0
    return (int(total) + per_page - 1) // per_page


def page_of(posts: Sequence[T], page: int, per_page: int) -> list[T]:
    """Slice out 1-based page `page`; pages outside the range are empty."""
    if page < 1:
        return []
    return paginate(posts, per_page, (page - 1) * per_page)
