from __future__ import annotations


class ConfigError(RuntimeError):
    """Raised when configuration is missing or invalid."""


class ContentError(RuntimeError):
    """Raised when a content collection cannot be read from disk."""


class PostNotFoundError(RuntimeError):
    """Raised when a lookup by slug matches no post."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Post not found: {slug}")
        self.slug = slug
