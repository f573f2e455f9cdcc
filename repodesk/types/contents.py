"""Content and revision data models."""

from dataclasses import dataclass, field, replace
from typing import Any

from repodesk.types.repos import RepositoryRef


def normalize_path(path: str) -> str:
    """Repository-relative form of a path: no leading or trailing '/'."""
    return path.strip("/")


@dataclass(frozen=True)
class ResourceId:
    """
    A single addressable path in a repository at a branch or commit.

    Leading and trailing slashes are stripped from path, so "/docs/a.md" and
    "docs/a.md" name the same resource.
    """

    repository: RepositoryRef
    path: str
    ref: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", normalize_path(self.path))

    def at(self, ref: str) -> "ResourceId":
        """Return the same path addressed at another ref."""
        return replace(self, ref=ref)

    def __str__(self) -> str:
        return f"{self.repository.full_name}:{self.path}@{self.ref}"


@dataclass(frozen=True)
class AuthorIdentity:
    """Name and email recorded as author and committer of a commit."""

    name: str
    email: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "email": self.email}


@dataclass
class DirectoryEntry:
    """One entry of a directory listing, as reported by the store."""

    name: str
    path: str
    revision: str
    type: str  # "file", "dir", "symlink" or "submodule"
    size: int = 0
    html_url: str | None = None
    download_url: str | None = None

    @property
    def is_file(self) -> bool:
        return self.type == "file"

    @property
    def is_dir(self) -> bool:
        return self.type == "dir"


@dataclass
class RemoteFile:
    """A single file object as reported by the store, content still encoded."""

    entry: DirectoryEntry
    encoding: str | None
    encoded_content: str | None


@dataclass
class FileResource:
    """A decoded file and the revision of its exact bytes."""

    resource_id: ResourceId
    content: str
    revision: str
    entry: DirectoryEntry

    is_directory = False


@dataclass
class DirectoryResource:
    """A directory and its immediate entries."""

    resource_id: ResourceId
    entries: list[DirectoryEntry] = field(default_factory=list)

    is_directory = True


@dataclass
class StalenessReport:
    """Whether a path still holds the revision an editor last saw."""

    exists: bool
    current_revision: str | None
    changed: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "exists": self.exists,
            "currentRevision": self.current_revision,
            "changed": self.changed,
        }


@dataclass
class WriteResult:
    """Outcome of a committed write. ``revision`` is None for deletions."""

    revision: str | None
    commit_sha: str
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"revision": self.revision, "commitSha": self.commit_sha}
