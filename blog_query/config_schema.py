from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .sorting import SortKey

PositiveInt = Annotated[int, Field(ge=1)]


class CollectionConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    source: str

    @field_validator("source")
    @classmethod
    def _source_must_be_relative(cls, v: str) -> str:
        pattern = (v or "").strip()
        if not pattern:
            raise ValueError("must be a non-empty glob pattern")
        if pattern.startswith("/") or ".." in pattern.split("/"):
            raise ValueError("must be relative to the content root")
        return pattern


def _default_collections() -> dict[str, CollectionConfig]:
    return {
        "blog": CollectionConfig(source="blog/**/*.md"),
        "pages": CollectionConfig(source="pages/**/*.md"),
        "docs": CollectionConfig(source="**"),
    }


class ContentConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    root: str = "content"
    collections: dict[str, CollectionConfig] = Field(default_factory=_default_collections)

    @field_validator("collections")
    @classmethod
    def _at_least_one_collection(
        cls, v: dict[str, CollectionConfig]
    ) -> dict[str, CollectionConfig]:
        if not v:
            raise ValueError("must declare at least one collection")
        return v


class ListingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    page_size: PositiveInt = 9
    default_sort: SortKey = "date-desc"
    include_drafts: bool = False


class ReadingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    words_per_minute: PositiveInt = 200


class SiteConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = "Blog"
    url: str = "http://localhost:3000"
    default_image: str = "/images/og-default.png"

    @field_validator("url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        url = (v or "").strip().rstrip("/")
        if not url.startswith(("http://", "https://")):
            raise ValueError("must be an absolute http(s) URL")
        return url


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    content: ContentConfig = Field(default_factory=ContentConfig)
    listing: ListingConfig = Field(default_factory=ListingConfig)
    reading: ReadingConfig = Field(default_factory=ReadingConfig)
    site: SiteConfig = Field(default_factory=SiteConfig)
