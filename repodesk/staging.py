"""
Staging ledger.

Holds uncommitted edits for one editing session. Staging never contacts the
store; edits reach the store only through flush() or commit_all().
"""

from typing import TYPE_CHECKING

from repodesk.exceptions import NotFoundError, ValidationError
from repodesk.logging import get_logger
from repodesk.types.commits import BatchCommitResult
from repodesk.types.contents import AuthorIdentity, ResourceId, WriteResult, normalize_path
from repodesk.types.repos import RepositoryRef
from repodesk.types.staging import ChangeOperation, StagedChange

if TYPE_CHECKING:
    from repodesk.batch import BatchCommitter
    from repodesk.writer import ConflictSafeWriter

logger = get_logger("core")


def default_message(change: StagedChange) -> str:
    """Commit message used when a staged change carries none."""
    if change.operation is ChangeOperation.RENAME:
        return f"Rename {change.old_path} to {change.resource_id.path}"
    verb = {
        ChangeOperation.CREATE: "Create",
        ChangeOperation.UPDATE: "Update",
        ChangeOperation.DELETE: "Delete",
    }[change.operation]
    return f"{verb} {change.resource_id.path}"


class StagingLedger:
    """
    Per-session store of staged changes, keyed by ResourceId.

    Re-staging a resource replaces every entry that writes or removes it,
    including a rename whose source it is. Entries never expire.
    """

    def __init__(self) -> None:
        self._changes: dict[ResourceId, StagedChange] = {}

    def _touching(self, *resource_ids: ResourceId | None) -> list[ResourceId]:
        targets = [resource_id for resource_id in resource_ids if resource_id is not None]
        return [
            key
            for key, change in self._changes.items()
            if any(change.touches(target) for target in targets)
        ]

    def stage(
        self,
        resource_id: ResourceId,
        operation: ChangeOperation | str,
        content: str | None = None,
        base_revision: str | None = None,
        message: str | None = None,
        old_path: str | None = None,
    ) -> StagedChange:
        """
        Record an edit without committing it.

        Args:
            resource_id: File the edit applies to (the destination of a rename)
            operation: create, update, delete or rename
            content: New content (required for create and update, optional for rename)
            base_revision: Revision the edit is based on (required for update,
                delete and rename)
            message: Commit message for this change (optional)
            old_path: Source path of a rename

        Returns:
            The StagedChange now held for resource_id

        Raises:
            ValidationError: If the operation's required fields are missing
        """
        try:
            operation = ChangeOperation(operation)
        except ValueError as e:
            raise ValidationError(
                "INVALID_OPERATION", f"Unknown change type: {operation}"
            ) from e

        if operation in (ChangeOperation.CREATE, ChangeOperation.UPDATE) and content is None:
            raise ValidationError(
                "MISSING_CONTENT", "Content is required for create/update operations"
            )
        if operation is not ChangeOperation.CREATE and not base_revision:
            raise ValidationError(
                "MISSING_REVISION",
                "A base revision is required for update/delete/rename operations",
            )
        if operation is ChangeOperation.RENAME:
            if not old_path:
                raise ValidationError(
                    "MISSING_OLD_PATH", "oldPath is required for rename operations"
                )
            if normalize_path(old_path) == resource_id.path:
                raise ValidationError(
                    "INVALID_RENAME", f"Cannot rename '{resource_id.path}' onto itself"
                )

        change = StagedChange(
            resource_id=resource_id,
            operation=operation,
            content=content if operation is not ChangeOperation.DELETE else None,
            base_revision=base_revision or None,
            message=message or None,
            old_path=old_path if operation is ChangeOperation.RENAME else None,
        )
        # Re-insert so listing order follows the latest staging.
        for key in self._touching(resource_id, change.old_resource_id):
            del self._changes[key]
        self._changes[resource_id] = change
        logger.debug("Staged %s %s", operation.value, resource_id)
        return change

    def list_staged(
        self, repository: RepositoryRef | None = None, ref: str | None = None
    ) -> list[StagedChange]:
        """List staged changes in staging order, optionally for one repository/branch."""
        return [
            change
            for change in self._changes.values()
            if (repository is None or change.resource_id.repository == repository)
            and (ref is None or change.resource_id.ref == ref)
        ]

    def get(self, resource_id: ResourceId) -> StagedChange | None:
        return self._changes.get(resource_id)

    def is_staged(self, resource_id: ResourceId) -> bool:
        return resource_id in self._changes

    def __contains__(self, resource_id: object) -> bool:
        return resource_id in self._changes

    def __len__(self) -> int:
        return len(self._changes)

    def discard(self, resource_id: ResourceId) -> bool:
        """
        Drop the staged change for a resource, or the rename that moves it.

        Returns:
            True if a change was staged for it
        """
        targets = self._touching(resource_id)
        for key in targets:
            del self._changes[key]
        if targets:
            logger.debug("Discarded staged change for %s", resource_id)
        return bool(targets)

    def clear(self, repository: RepositoryRef | None = None, ref: str | None = None) -> int:
        """Discard all staged changes, optionally for one repository/branch."""
        targets = [change.resource_id for change in self.list_staged(repository, ref)]
        for resource_id in targets:
            del self._changes[resource_id]
        return len(targets)

    def flush(
        self,
        resource_id: ResourceId,
        writer: "ConflictSafeWriter",
        author: AuthorIdentity | None = None,
    ) -> WriteResult:
        """
        Commit one staged change on its own.

        The entry is consumed whether or not the write succeeds; on failure
        the store is unchanged and the caller decides whether to re-stage.
        A rename spans two paths and only goes through commit_all(); it is
        left staged.

        Raises:
            NotFoundError: If nothing is staged for resource_id
            ValidationError: If the staged change is a rename
            ConflictError: If the change's base revision is stale
        """
        change = self._changes.get(resource_id)
        if change is None:
            raise NotFoundError("NOT_STAGED", f"No staged change for {resource_id}")
        if change.operation is ChangeOperation.RENAME:
            raise ValidationError(
                "RENAME_NEEDS_BATCH", f"Rename of {resource_id} must be committed with the batch"
            )
        del self._changes[resource_id]

        message = change.message or default_message(change)
        if change.operation is ChangeOperation.DELETE:
            return writer.delete(resource_id, change.base_revision or "", message, author=author)
        return writer.write(
            resource_id,
            content=change.content or "",
            base_revision=change.base_revision,
            message=message,
            author=author,
        )

    def commit_all(
        self,
        repository: RepositoryRef,
        ref: str,
        committer: "BatchCommitter",
        message: str,
        author: AuthorIdentity | None = None,
    ) -> BatchCommitResult:
        """
        Commit every change staged for repository@ref as one commit.

        Entries are consumed only when the commit succeeds.

        Raises:
            ValidationError: If nothing is staged for repository@ref
            ConflictError: If any base revision is stale
        """
        changes = self.list_staged(repository, ref)
        result = committer.commit(repository, ref, changes, message, author=author)
        for change in changes:
            self._changes.pop(change.resource_id, None)
        return result
