"""
Directory/collection accessor.

Lists the immediate children of a path and annotates markdown files with
metadata decoded from their front-matter. A child that cannot be fetched or
decoded degrades to a minimal item instead of failing the listing.
"""

import re
from collections.abc import Callable
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from repodesk.exceptions import NotAFileError, NotFoundError, UndecodableError
from repodesk.frontmatter import FrontMatterDecoder, decode_front_matter
from repodesk.logging import get_logger
from repodesk.reader import RevisionReader
from repodesk.types.collections import CollectionItem, ItemSummary
from repodesk.types.contents import DirectoryEntry, DirectoryResource, ResourceId

if TYPE_CHECKING:
    from repodesk.client import RepoDeskClient

logger = get_logger("core")

MARKDOWN_EXTENSIONS = (".md", ".markdown")
INDEX_SLUG = "index"

EntryPredicate = Callable[[DirectoryEntry], bool]

_MARKDOWN_SUFFIX = re.compile(r"\.(md|markdown)$", re.IGNORECASE)


def is_markdown_file(entry: DirectoryEntry) -> bool:
    """Default listing filter: markdown files only."""
    return entry.is_file and entry.name.lower().endswith(MARKDOWN_EXTENSIONS)


def title_from_name(name: str) -> str:
    return _MARKDOWN_SUFFIX.sub("", name)


def _normalize_date(value: Any) -> str | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value)
    return text.split("T", 1)[0] if "T" in text else text


def _normalize_tags(value: Any) -> list[str]:
    if isinstance(value, list):
        return [str(tag) for tag in value]
    if value:
        return [tag.strip() for tag in str(value).split(",")]
    return []


def summarize(metadata: dict[str, Any], name: str) -> ItemSummary:
    """
    Derive presentation metadata from decoded front-matter.

    Args:
        metadata: Decoded front-matter fields
        name: File name, used when there is no title

    Returns:
        ItemSummary
    """
    draft = metadata.get("draft")
    return ItemSummary(
        title=str(metadata.get("title") or title_from_name(name)),
        description=str(metadata.get("description") or ""),
        date=_normalize_date(metadata.get("date")),
        tags=_normalize_tags(metadata.get("tags")),
        hero_image=str(metadata.get("heroImage") or metadata.get("image") or ""),
        slug=str(metadata.get("slug") or ""),
        reading_time=str(metadata.get("reading_time") or metadata.get("readingTime") or ""),
        draft=draft is True or str(draft).lower() == "true",
    )


def is_index(item: CollectionItem) -> bool:
    """Whether an item is the collection's index page."""
    slug = item.summary.slug or title_from_name(item.name)
    return slug == INDEX_SLUG


class CollectionAccessor:
    """Lists collections of documents under a path."""

    def __init__(
        self,
        client: "RepoDeskClient",
        decoder: FrontMatterDecoder = decode_front_matter,
        reader: RevisionReader | None = None,
    ) -> None:
        self.reader = reader or RevisionReader(client)
        self.decoder = decoder

    def _entries(self, resource_id: ResourceId) -> list[DirectoryEntry]:
        resource = self.reader.read(resource_id)
        if isinstance(resource, DirectoryResource):
            return resource.entries
        return [resource.entry]

    def list_folders(self, resource_id: ResourceId) -> list[DirectoryEntry]:
        """List the sub-directories directly under a path."""
        return [entry for entry in self._entries(resource_id) if entry.is_dir]

    def list(
        self,
        resource_id: ResourceId,
        predicate: EntryPredicate | None = None,
        decode_extensions: tuple[str, ...] = MARKDOWN_EXTENSIONS,
    ) -> list[CollectionItem]:
        """
        List the immediate children of a path.

        A path naming a single file yields a one-element listing. The index
        item (slug or file name "index") is left out.

        Args:
            resource_id: Directory (or file) and ref to list
            predicate: Filter over entries (default: markdown files)
            decode_extensions: Extensions whose content is fetched and decoded

        Returns:
            List of CollectionItem objects in store order

        Raises:
            NotFoundError: If the path itself does not exist
        """
        predicate = predicate or is_markdown_file
        items = []
        for entry in self._entries(resource_id):
            if not predicate(entry):
                continue
            if entry.is_file and entry.name.lower().endswith(decode_extensions):
                item = self._decoded_item(resource_id, entry)
            else:
                item = self._fallback_item(entry)
            if not is_index(item):
                items.append(item)
        return items

    def _decoded_item(self, parent: ResourceId, entry: DirectoryEntry) -> CollectionItem:
        child = ResourceId(repository=parent.repository, path=entry.path, ref=parent.ref)
        try:
            resource = self.reader.read_file(child)
        except (NotFoundError, UndecodableError, NotAFileError) as e:
            logger.warning("Failed to load %s for listing: %s", entry.path, e)
            return self._fallback_item(entry)

        try:
            front_matter = self.decoder(resource.content)
            metadata = dict(front_matter.metadata)
            summary = summarize(metadata, entry.name)
        except Exception as e:  # any decoder failure degrades the item
            logger.warning("Failed to parse front-matter for %s: %s", entry.path, e)
            return self._fallback_item(entry)

        return CollectionItem(
            name=entry.name,
            path=entry.path,
            revision=entry.revision,
            summary=summary,
            raw_metadata=metadata,
            size=entry.size,
            html_url=entry.html_url,
            download_url=entry.download_url,
        )

    @staticmethod
    def _fallback_item(entry: DirectoryEntry) -> CollectionItem:
        return CollectionItem(
            name=entry.name,
            path=entry.path,
            revision=entry.revision,
            summary=ItemSummary(title=title_from_name(entry.name)),
            raw_metadata={},
            size=entry.size,
            html_url=entry.html_url,
            download_url=entry.download_url,
        )
