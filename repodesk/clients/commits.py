"""Commits resource client."""

from datetime import datetime
from typing import TYPE_CHECKING, Any

from repodesk.clients.repos import repo_path
from repodesk.types.commits import CommitAuthor, CommitRecord
from repodesk.types.repos import RepositoryRef

if TYPE_CHECKING:
    from repodesk.transport import HTTPTransport


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO 8601 timestamp with a Z suffix."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _parse_signature(data: dict[str, Any] | None) -> CommitAuthor | None:
    if not data:
        return None
    return CommitAuthor(
        name=data.get("name") or "Unknown",
        email=data.get("email") or "",
        date=parse_timestamp(data.get("date")),
    )


def _parse_commit(data: dict[str, Any]) -> CommitRecord:
    commit = data.get("commit", {})
    committer = _parse_signature(commit.get("committer"))
    author = _parse_signature(commit.get("author")) or committer
    return CommitRecord(
        sha=data["sha"],
        message=commit.get("message", ""),
        author=author or CommitAuthor(name="Unknown", email="", date=None),
        committer=committer,
    )


class CommitsClient:
    """Client for commit history queries."""

    def __init__(self, transport: "HTTPTransport") -> None:
        self.transport = transport

    def list(
        self,
        repo: RepositoryRef,
        sha: str | None = None,
        path: str | None = None,
        per_page: int = 30,
    ) -> list[CommitRecord]:
        """
        List commits reachable from a ref, most recent first.

        Args:
            repo: Repository to query
            sha: Branch name or commit sha to start from
            path: Only commits touching this path
            per_page: Maximum number of commits returned (1-100)

        Returns:
            List of CommitRecord objects
        """
        params: dict[str, Any] = {"per_page": per_page}
        if sha:
            params["sha"] = sha
        if path:
            params["path"] = path

        data = self.transport.request("GET", f"{repo_path(repo)}/commits", params=params) or []
        return [_parse_commit(item) for item in data]
