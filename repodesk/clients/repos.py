"""Repositories resource client."""

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from repodesk.types.repos import Branch, RepositoryInfo, RepositoryRef

if TYPE_CHECKING:
    from repodesk.transport import HTTPTransport

_PAGE_SIZE = 100


def repo_path(repo: RepositoryRef) -> str:
    """API path prefix for a repository."""
    return f"/repos/{quote(repo.owner, safe='')}/{quote(repo.name, safe='')}"


def _parse_repository(data: dict[str, Any]) -> RepositoryInfo:
    owner = data.get("owner") or {}
    return RepositoryInfo(
        full_name=data["full_name"],
        name=data["name"],
        owner=owner.get("login", data["full_name"].split("/", 1)[0]),
        default_branch=data.get("default_branch", "main"),
        private=bool(data.get("private", False)),
        description=data.get("description") or "",
    )


class ReposClient:
    """Client for repository and branch lookups."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the repos client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def list_for_authenticated_user(self) -> list[RepositoryInfo]:
        """
        List every repository the token's principal can access.

        Follows pagination until a short page is returned. Repositories are
        ordered by most recent update.

        Returns:
            List of RepositoryInfo objects

        Raises:
            AuthenticationError: If the token is invalid
        """
        repos: list[RepositoryInfo] = []
        page = 1
        while True:
            data = self.transport.request(
                "GET",
                "/user/repos",
                params={"type": "all", "sort": "updated", "per_page": _PAGE_SIZE, "page": page},
            ) or []
            repos.extend(_parse_repository(item) for item in data)
            if len(data) < _PAGE_SIZE:
                return repos
            page += 1

    def get(self, repo: RepositoryRef) -> RepositoryInfo:
        """
        Get repository information.

        Raises:
            NotFoundError: If the repository does not exist or is not visible
        """
        data = self.transport.request("GET", repo_path(repo))
        return _parse_repository(data)

    def list_branches(self, repo: RepositoryRef) -> list[str]:
        """List the names of all branches, following pagination."""
        names: list[str] = []
        page = 1
        while True:
            data = self.transport.request(
                "GET",
                f"{repo_path(repo)}/branches",
                params={"per_page": _PAGE_SIZE, "page": page},
            ) or []
            names.extend(item["name"] for item in data)
            if len(data) < _PAGE_SIZE:
                return names
            page += 1

    def get_branch(self, repo: RepositoryRef, branch: str) -> Branch:
        """
        Get a branch and its head commit.

        Raises:
            NotFoundError: If the branch does not exist
        """
        data = self.transport.request(
            "GET", f"{repo_path(repo)}/branches/{quote(branch, safe='')}"
        )
        return Branch(name=data["name"], commit_sha=data["commit"]["sha"])
