from __future__ import annotations

from .aggregates import unique_categories, unique_tags
from .config import load_config
from .config_schema import AppConfig
from .content import ContentStore
from .errors import ConfigError, ContentError, PostNotFoundError
from .filters import (
    filter_posts,
    filter_posts_by_category,
    filter_posts_by_search,
    filter_posts_by_tag,
    matches_category,
    matches_search,
    matches_tag,
)
from .normalize import normalize_post, normalize_posts
from .paginate import paginate
from .post import Post
from .query import PostQuery, QueryResult, adjacent_posts, find_post, run_query
from .sorting import SORT_KEYS, sort_posts

__all__ = [
    "AppConfig",
    "ConfigError",
    "ContentError",
    "ContentStore",
    "Post",
    "PostNotFoundError",
    "PostQuery",
    "QueryResult",
    "SORT_KEYS",
    "adjacent_posts",
    "filter_posts",
    "filter_posts_by_category",
    "filter_posts_by_search",
    "filter_posts_by_tag",
    "find_post",
    "load_config",
    "matches_category",
    "matches_search",
    "matches_tag",
    "normalize_post",
    "normalize_posts",
    "paginate",
    "run_query",
    "sort_posts",
    "unique_categories",
    "unique_tags",
]
