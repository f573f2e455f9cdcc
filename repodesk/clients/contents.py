"""Contents resource client.

Reads, creates, updates and deletes single files through the contents API.
The store enforces compare-and-swap on the blob sha supplied with a write.
"""

import base64
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from repodesk.clients.repos import repo_path
from repodesk.exceptions import ConflictError, ValidationError
from repodesk.types.contents import (
    AuthorIdentity,
    DirectoryEntry,
    RemoteFile,
    WriteResult,
)
from repodesk.types.repos import RepositoryRef

if TYPE_CHECKING:
    from repodesk.transport import HTTPTransport


def contents_path(repo: RepositoryRef, path: str) -> str:
    """API path of a file or directory in the contents API."""
    return f"{repo_path(repo)}/contents/{quote(path.strip('/'), safe='/')}"


def _parse_entry(data: dict[str, Any]) -> DirectoryEntry:
    return DirectoryEntry(
        name=data["name"],
        path=data["path"],
        revision=data["sha"],
        type=data.get("type", "file"),
        size=data.get("size", 0) or 0,
        html_url=data.get("html_url"),
        download_url=data.get("download_url"),
    )


def _parse_write(data: dict[str, Any]) -> WriteResult:
    content = data.get("content") or {}
    commit = data.get("commit") or {}
    return WriteResult(
        revision=content.get("sha"),
        commit_sha=commit["sha"],
        message=commit.get("message", ""),
    )


class ContentsClient:
    """Client for file contents operations."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the contents client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def get(
        self, repo: RepositoryRef, path: str, ref: str | None = None
    ) -> RemoteFile | list[DirectoryEntry]:
        """
        Get a file or the entries of a directory.

        The store answers with a single object for a file and with an array
        for a directory; both shapes are returned as-is.

        Args:
            repo: Repository to read from
            path: Path inside the repository ("" for the root)
            ref: Branch name or commit sha (default: the default branch)

        Returns:
            RemoteFile for a file, list of DirectoryEntry for a directory

        Raises:
            NotFoundError: If the path does not exist at the ref
        """
        params = {"ref": ref} if ref else None
        data = self.transport.request("GET", contents_path(repo, path), params=params)

        if isinstance(data, list):
            return [_parse_entry(item) for item in data]

        return RemoteFile(
            entry=_parse_entry(data),
            encoding=data.get("encoding"),
            encoded_content=data.get("content"),
        )

    def put(
        self,
        repo: RepositoryRef,
        path: str,
        content: str,
        message: str,
        branch: str,
        sha: str | None = None,
        author: AuthorIdentity | None = None,
    ) -> WriteResult:
        """
        Create or update a file in a single commit.

        Args:
            repo: Repository to write to
            path: File path
            content: New file content (text, sent base64-encoded)
            message: Commit message
            branch: Branch to commit on
            sha: Blob sha the caller last saw; omit for a new file
            author: Author and committer identity (default: token owner)

        Returns:
            WriteResult with the new blob sha and the commit sha

        Raises:
            ConflictError: If sha is stale, or omitted for an existing file
            NotFoundError: If the repository or branch does not exist
            AuthorizationError: If the token cannot write to the repository
        """
        body: dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": branch,
        }
        if sha:
            body["sha"] = sha
        if author is not None:
            body["author"] = author.to_dict()
            body["committer"] = author.to_dict()

        try:
            data = self.transport.request("PUT", contents_path(repo, path), body=body)
        except ValidationError as e:
            # Creating over an existing file is refused with 422; that is a
            # stale base exactly like a mismatched sha.
            if not sha and "sha" in e.message:
                raise ConflictError("CONFLICT", e.message, e.request_id) from e
            raise

        return _parse_write(data)

    def delete(
        self,
        repo: RepositoryRef,
        path: str,
        message: str,
        sha: str,
        branch: str,
        author: AuthorIdentity | None = None,
    ) -> WriteResult:
        """
        Delete a file in a single commit.

        Raises:
            ConflictError: If sha does not match the current blob
            NotFoundError: If the file does not exist
        """
        body: dict[str, Any] = {"message": message, "sha": sha, "branch": branch}
        if author is not None:
            body["author"] = author.to_dict()
            body["committer"] = author.to_dict()

        data = self.transport.request("DELETE", contents_path(repo, path), body=body)
        return _parse_write(data)
