"""Collection listing data models."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class FrontMatter:
    """Decoded front-matter of a markdown document."""

    metadata: dict[str, Any] = field(default_factory=dict)
    body: str = ""
    raw_block: str = ""


@dataclass
class ItemSummary:
    """Presentation metadata derived from a document's front-matter."""

    title: str
    description: str = ""
    date: str | None = None
    tags: list[str] = field(default_factory=list)
    hero_image: str = ""
    slug: str = ""
    reading_time: str = ""
    draft: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "date": self.date,
            "tags": list(self.tags),
            "heroImage": self.hero_image,
            "slug": self.slug,
            "readingTime": self.reading_time,
            "draft": self.draft,
        }


@dataclass
class CollectionItem:
    """One entry of a collection listing."""

    name: str
    path: str
    revision: str
    summary: ItemSummary
    raw_metadata: dict[str, Any] = field(default_factory=dict)
    size: int = 0
    html_url: str | None = None
    download_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "revision": self.revision,
            "size": self.size,
            "url": self.html_url,
            "downloadUrl": self.download_url,
            "frontmatter": self.summary.to_dict(),
        }
