"""
Conflict-safe writer.

Every write carries the revision the caller last observed. The store compares
it with the path's current revision and refuses the write when they differ;
the refusal is surfaced as ConflictError and never retried here.
"""

from typing import TYPE_CHECKING

from repodesk.exceptions import RepoDeskError, ValidationError
from repodesk.logging import get_logger, log_remote_failure
from repodesk.types.contents import AuthorIdentity, ResourceId, WriteResult

if TYPE_CHECKING:
    from repodesk.client import RepoDeskClient

logger = get_logger("core")


class ConflictSafeWriter:
    """Commits single-file writes with compare-and-swap on the base revision."""

    def __init__(self, client: "RepoDeskClient") -> None:
        self.client = client

    def write(
        self,
        resource_id: ResourceId,
        content: str,
        base_revision: str | None,
        message: str,
        author: AuthorIdentity | None = None,
    ) -> WriteResult:
        """
        Create or update a file as a new commit on resource_id.ref.

        Args:
            resource_id: File to write; its ref must be a branch
            content: Full new content
            base_revision: Revision last observed, None or "" for a new file
            message: Commit message
            author: Author and committer identity (default: token owner)

        Returns:
            WriteResult with the new revision and commit sha

        Raises:
            ConflictError: If base_revision is stale
            NotFoundError: If the repository or branch does not exist
            AuthorizationError: If writing is not permitted
        """
        if content is None:
            raise ValidationError("MISSING_CONTENT", "Content is required for a write")
        if not message:
            raise ValidationError("MISSING_MESSAGE", "A commit message is required")

        try:
            result = self.client.contents.put(
                resource_id.repository,
                resource_id.path,
                content=content,
                message=message,
                branch=resource_id.ref,
                sha=base_revision or None,
                author=author,
            )
        except RepoDeskError as e:
            log_remote_failure("write", resource_id, e)
            raise

        logger.info(
            "Committed %s as %s (revision %s)",
            resource_id,
            result.commit_sha[:12],
            result.revision,
        )
        return result

    def delete(
        self,
        resource_id: ResourceId,
        base_revision: str,
        message: str,
        author: AuthorIdentity | None = None,
    ) -> WriteResult:
        """
        Delete a file as a new commit on resource_id.ref.

        Raises:
            ValidationError: If base_revision is missing
            ConflictError: If base_revision is stale
            NotFoundError: If the file does not exist
        """
        if not base_revision:
            raise ValidationError("MISSING_REVISION", "A base revision is required to delete")
        if not message:
            raise ValidationError("MISSING_MESSAGE", "A commit message is required")

        try:
            result = self.client.contents.delete(
                resource_id.repository,
                resource_id.path,
                message=message,
                sha=base_revision,
                branch=resource_id.ref,
                author=author,
            )
        except RepoDeskError as e:
            log_remote_failure("delete", resource_id, e)
            raise

        logger.info("Deleted %s in %s", resource_id, result.commit_sha[:12])
        return result
