"""Reverter: restore a resource to a prior commit's content as a new commit."""

from typing import TYPE_CHECKING

from repodesk.exceptions import RepoDeskError
from repodesk.history import HistoryReader
from repodesk.logging import get_logger, log_remote_failure
from repodesk.reader import RevisionReader
from repodesk.types.contents import AuthorIdentity, ResourceId, WriteResult
from repodesk.writer import ConflictSafeWriter

if TYPE_CHECKING:
    from repodesk.client import RepoDeskClient

logger = get_logger("core")


class Reverter:
    """
    Composes the history reader and the conflict-safe writer.

    The base revision of the revert commit is the path's *current* revision
    on the live branch, so a revert is conflict-checked like any other write
    and cannot overwrite an edit it never saw.
    """

    def __init__(
        self,
        client: "RepoDeskClient",
        reader: RevisionReader | None = None,
        history: HistoryReader | None = None,
        writer: ConflictSafeWriter | None = None,
    ) -> None:
        self.reader = reader or RevisionReader(client)
        self.history = history or HistoryReader(client, self.reader)
        self.writer = writer or ConflictSafeWriter(client)

    def revert_to(
        self,
        resource_id: ResourceId,
        target_sha: str,
        message: str,
        author: AuthorIdentity | None = None,
    ) -> WriteResult:
        """
        Write the content the resource had at target_sha onto resource_id.ref.

        If the file was deleted since, it is recreated.

        Args:
            resource_id: File and live branch
            target_sha: Commit whose content to restore
            message: Commit message
            author: Author and committer identity (optional)

        Returns:
            WriteResult of the revert commit

        Raises:
            NotFoundError: If the path did not exist at target_sha
            NotAFileError: If the path is a directory at target_sha or on the branch
            ConflictError: If the file changed between steps 2 and 3
        """
        try:
            content = self.history.materialize_at(resource_id, target_sha)
            current = self.reader.current_revision(resource_id)
        except RepoDeskError as e:
            log_remote_failure("revert", resource_id, e)
            raise

        if current is None:
            logger.info("Reverting %s to %s recreates a deleted file", resource_id, target_sha[:12])

        return self.writer.write(
            resource_id,
            content=content,
            base_revision=current,
            message=message,
            author=author,
        )
