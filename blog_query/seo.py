from __future__ import annotations

import html
import re
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from .config_schema import SiteConfig
from .normalize import resolve_field
from .post import Post

REQUIRED_SEO_TAGS: tuple[str, ...] = ("<title>", "og:title", "og:description", "og:type", "og:url")


@dataclass(frozen=True)
class SeoCheck:
    valid: bool
    missing: Sequence[str]


@dataclass(frozen=True)
class MetaTag:
    property: str
    content: str

    @property
    def attribute(self) -> str:
        # Open Graph uses `property`, everything else the plain `name` attribute.
        if self.property.startswith(("og:", "article:")):
            return "property"
        return "name"

    def render(self) -> str:
        return (
            f'<meta {self.attribute}="{html.escape(self.property, quote=True)}" '
            f'content="{html.escape(self.content, quote=True)}">'
        )


def check_seo_tags(page_html: str) -> SeoCheck:
    text = page_html or ""
    missing = tuple(tag for tag in REQUIRED_SEO_TAGS if tag not in text)
    return SeoCheck(valid=not missing, missing=missing)


def extract_meta_content(page_html: str, prop: str) -> str | None:
    """Return the `content` of the first meta tag whose property or name is `prop`."""
    pattern = re.compile(
        r'<meta[^>]*(?:property|name)="' + re.escape(prop) + r'"[^>]*content="([^"]*)"',
        re.IGNORECASE,
    )
    match = pattern.search(page_html or "")
    if match is None:
        return None
    return html.unescape(match.group(1))


def _absolute(site: SiteConfig, path: str) -> str:
    if path.startswith(("http://", "https://")):
        return path
    return f"{site.url}/{path.lstrip('/')}"


def page_title(post: Post, site: SiteConfig) -> str:
    return f"{post.title} | {site.name}"


def build_post_meta(post: Post, site: SiteConfig, *, image: str | None = None) -> list[MetaTag]:
    tags = [
        MetaTag("description", post.description),
        MetaTag("og:title", post.title),
        MetaTag("og:description", post.description),
        MetaTag("og:type", "article"),
        MetaTag("og:url", _absolute(site, post.path)),
        MetaTag("og:image", _absolute(site, image or site.default_image)),
        MetaTag("og:site_name", site.name),
        MetaTag("article:published_time", post.published_at.isoformat()),
        MetaTag("article:author", post.author),
        MetaTag("twitter:card", "summary_large_image"),
    ]
    tags.extend(MetaTag("article:tag", t) for t in post.tags)
    return tags


def render_head(post: Post, site: SiteConfig, *, image: str | None = None) -> str:
    lines = [f"<title>{html.escape(page_title(post, site))}</title>"]
    lines.extend(tag.render() for tag in build_post_meta(post, site, image=image))
    return "\n".join(lines)


def _coerce_image(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def image_from_record(raw: Mapping[str, Any]) -> str | None:
    """Cover image declared in a raw record's frontmatter, if any."""
    return resolve_field(raw, "image", _coerce_image)
