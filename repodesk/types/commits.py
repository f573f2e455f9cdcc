"""Commit and git object data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class CommitAuthor:
    """Author or committer signature of a commit."""

    name: str
    email: str
    date: datetime | None


@dataclass
class CommitRecord:
    """A commit touching a resource, as listed by the store."""

    sha: str
    message: str
    author: CommitAuthor
    committer: CommitAuthor | None = None

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0]

    @property
    def date(self) -> datetime | None:
        if self.author.date is not None:
            return self.author.date
        return self.committer.date if self.committer else None

    def to_dict(self) -> dict[str, Any]:
        date = self.date.isoformat() if self.date else ""
        return {
            "sha": self.sha,
            "message": self.summary,
            "author": {
                "name": self.author.name,
                "email": self.author.email,
                "date": date,
            },
            "date": date,
        }


@dataclass
class GitCommit:
    """A raw git commit object."""

    sha: str
    tree_sha: str
    parents: list[str] = field(default_factory=list)
    message: str = ""


@dataclass
class TreeEntry:
    """One entry of a recursive git tree."""

    path: str
    mode: str
    type: str  # "blob", "tree" or "commit"
    sha: str


@dataclass
class BatchCommitResult:
    """Outcome of committing several staged changes as one commit."""

    commit_sha: str
    message: str
    files_changed: int
    revisions: dict[str, str | None] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "commitSha": self.commit_sha,
            "filesChanged": self.files_changed,
            "revisions": dict(self.revisions),
        }
