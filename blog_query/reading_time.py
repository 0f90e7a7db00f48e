from __future__ import annotations

import math

from .post import Post, body_text

DEFAULT_WORDS_PER_MINUTE = 200


def _word_count(text: str) -> int:
    return len((text or "").split())


def reading_time_minutes(post: Post, *, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE) -> int:
    """
    Estimate reading time in whole minutes, rounded up.

    Structured (render-tree) bodies are counted over their JSON text.
    """
    if words_per_minute <= 0:
        raise ValueError("words_per_minute must be positive")

    words = _word_count(post.title) + _word_count(post.description)
    words += _word_count(body_text(post.body))

    return math.ceil(words / words_per_minute)
