"""Git data resource client.

Low-level access to refs, commits, trees and blobs, used to commit several
files at once.
"""

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from repodesk.clients.repos import repo_path
from repodesk.exceptions import ConflictError, ValidationError
from repodesk.types.commits import GitCommit, TreeEntry
from repodesk.types.contents import AuthorIdentity
from repodesk.types.repos import RepositoryRef

if TYPE_CHECKING:
    from repodesk.transport import HTTPTransport


def _parse_git_commit(data: dict[str, Any]) -> GitCommit:
    return GitCommit(
        sha=data["sha"],
        tree_sha=data["tree"]["sha"],
        parents=[parent["sha"] for parent in data.get("parents", [])],
        message=data.get("message", ""),
    )


class GitDataClient:
    """Client for the git data API."""

    def __init__(self, transport: "HTTPTransport") -> None:
        self.transport = transport

    def get_ref(self, repo: RepositoryRef, ref: str) -> str:
        """
        Resolve a fully qualified ref (e.g. "heads/main") to a commit sha.

        Raises:
            NotFoundError: If the ref does not exist
        """
        data = self.transport.request("GET", f"{repo_path(repo)}/git/ref/{quote(ref, safe='/')}")
        return data["object"]["sha"]

    def get_commit(self, repo: RepositoryRef, sha: str) -> GitCommit:
        """Get a commit object."""
        data = self.transport.request("GET", f"{repo_path(repo)}/git/commits/{sha}")
        return _parse_git_commit(data)

    def get_tree(
        self, repo: RepositoryRef, tree_sha: str, recursive: bool = True
    ) -> list[TreeEntry]:
        """List the entries of a tree, recursively by default."""
        params = {"recursive": "1"} if recursive else None
        data = self.transport.request(
            "GET", f"{repo_path(repo)}/git/trees/{tree_sha}", params=params
        )
        return [
            TreeEntry(
                path=item["path"],
                mode=item.get("mode", "100644"),
                type=item.get("type", "blob"),
                sha=item["sha"],
            )
            for item in data.get("tree", [])
        ]

    def create_blob(self, repo: RepositoryRef, content: str) -> str:
        """Store text content as a blob and return its sha."""
        data = self.transport.request(
            "POST",
            f"{repo_path(repo)}/git/blobs",
            body={"content": content, "encoding": "utf-8"},
        )
        return data["sha"]

    def create_tree(
        self,
        repo: RepositoryRef,
        base_tree: str,
        entries: list[dict[str, Any]],
    ) -> str:
        """
        Create a tree on top of base_tree.

        Entries with ``"sha": None`` remove the path from the tree.
        """
        data = self.transport.request(
            "POST",
            f"{repo_path(repo)}/git/trees",
            body={"base_tree": base_tree, "tree": entries},
        )
        return data["sha"]

    def create_commit(
        self,
        repo: RepositoryRef,
        message: str,
        tree: str,
        parents: list[str],
        author: AuthorIdentity | None = None,
    ) -> GitCommit:
        """Create a commit object pointing at tree."""
        body: dict[str, Any] = {"message": message, "tree": tree, "parents": parents}
        if author is not None:
            body["author"] = author.to_dict()
            body["committer"] = author.to_dict()
        data = self.transport.request("POST", f"{repo_path(repo)}/git/commits", body=body)
        return _parse_git_commit(data)

    def update_ref(
        self, repo: RepositoryRef, ref: str, sha: str, force: bool = False
    ) -> str:
        """
        Move a ref to sha.

        Raises:
            ConflictError: If the move is not a fast-forward and force is False
        """
        try:
            data = self.transport.request(
                "PATCH",
                f"{repo_path(repo)}/git/refs/{quote(ref, safe='/')}",
                body={"sha": sha, "force": force},
            )
        except ValidationError as e:
            if "fast forward" in e.message.lower():
                raise ConflictError("CONFLICT", e.message, e.request_id) from e
            raise
        return data["object"]["sha"]
