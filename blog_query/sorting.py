from __future__ import annotations

import unicodedata
from typing import Iterable, Literal, get_args

from .post import Post

SortKey = Literal["date-asc", "date-desc", "title-asc", "title-desc"]
SORT_KEYS: tuple[str, ...] = get_args(SortKey)


def title_sort_key(title: str) -> tuple[str, str, str]:
    """
    Collation key approximating locale-aware string comparison.

    Compares base letters first ignoring accents and case, then accents, then
    case with lowercase ordered before uppercase.
    """
    decomposed = unicodedata.normalize("NFKD", title or "")
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), decomposed.casefold(), decomposed.swapcase())


def sort_posts(posts: Iterable[Post], key: str) -> list[Post]:
    """
    Return a new, stably sorted list of posts.

    Unknown keys leave the input order unchanged.
    """
    items = list(posts)

    if key == "date-asc":
        return sorted(items, key=lambda p: p.published_at)
    if key == "date-desc":
        return sorted(items, key=lambda p: p.published_at, reverse=True)
    if key == "title-asc":
        return sorted(items, key=lambda p: title_sort_key(p.title))
    if key == "title-desc":
        return sorted(items, key=lambda p: title_sort_key(p.title), reverse=True)

    return items
