"""History reader: commits touching a resource and its content at any of them."""

from typing import TYPE_CHECKING

from repodesk.exceptions import RepoDeskError, ValidationError
from repodesk.logging import log_remote_failure
from repodesk.reader import RevisionReader
from repodesk.types.commits import CommitRecord
from repodesk.types.contents import ResourceId

if TYPE_CHECKING:
    from repodesk.client import RepoDeskClient

MAX_HISTORY_LIMIT = 50


class HistoryReader:
    """Read-only access to a resource's commit history. Nothing is cached."""

    def __init__(self, client: "RepoDeskClient", reader: RevisionReader | None = None) -> None:
        self.client = client
        self.reader = reader or RevisionReader(client)

    def list_commits(
        self, resource_id: ResourceId, limit: int = MAX_HISTORY_LIMIT
    ) -> list[CommitRecord]:
        """
        List commits that touched the resource, most recent first.

        The resource does not have to exist at resource_id.ref, so history of
        a deleted file stays available.

        Args:
            resource_id: Path and branch to walk back from
            limit: Maximum number of commits (1-50)

        Returns:
            At most ``limit`` CommitRecord objects

        Raises:
            ValidationError: If limit is out of range
        """
        if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= MAX_HISTORY_LIMIT:
            raise ValidationError(
                "INVALID_LIMIT", f"limit must be between 1 and {MAX_HISTORY_LIMIT}"
            )

        try:
            commits = self.client.commits.list(
                resource_id.repository,
                sha=resource_id.ref,
                path=resource_id.path,
                per_page=limit,
            )
        except RepoDeskError as e:
            log_remote_failure("list_commits", resource_id, e)
            raise

        return commits[:limit]

    def materialize_at(self, resource_id: ResourceId, revision_sha: str) -> str:
        """
        Return the resource's content as of a commit.

        Args:
            resource_id: Path to read; its ref is ignored
            revision_sha: Commit sha to read at

        Returns:
            Decoded file content

        Raises:
            NotFoundError: If the path did not exist at that commit
            NotAFileError: If the path was a directory at that commit
        """
        if not revision_sha:
            raise ValidationError("MISSING_REVISION", "A commit sha is required")
        return self.reader.read_file(resource_id.at(revision_sha)).content
