"""
Batch committer.

Commits several staged changes as a single commit through the git data API.
Each change is checked against the branch head before anything is written,
and the branch is moved without force, so a concurrent commit turns the whole
batch into a ConflictError instead of overwriting it.
"""

from typing import TYPE_CHECKING, Any

from repodesk.exceptions import ConflictError, RepoDeskError, ValidationError
from repodesk.logging import get_logger, log_remote_failure
from repodesk.types.commits import BatchCommitResult, TreeEntry
from repodesk.types.contents import AuthorIdentity
from repodesk.types.repos import RepositoryRef
from repodesk.types.staging import ChangeOperation, StagedChange

if TYPE_CHECKING:
    from repodesk.client import RepoDeskClient

logger = get_logger("core")

FILE_MODE = "100644"


def _verify(change: StagedChange, current: dict[str, TreeEntry]) -> None:
    path = change.resource_id.path
    if change.operation in (ChangeOperation.CREATE, ChangeOperation.RENAME):
        if path in current:
            raise ConflictError("CONFLICT", f"'{path}' already exists on the branch")
    if change.operation is ChangeOperation.CREATE:
        return

    # Updates, deletes and rename sources are checked against the base revision.
    source = change.old_path if change.operation is ChangeOperation.RENAME else path
    entry = current.get(source or "")
    if entry is None:
        raise ConflictError("CONFLICT", f"'{source}' no longer exists on the branch")
    if entry.sha != change.base_revision:
        raise ConflictError(
            "CONFLICT",
            f"'{source}' has been modified: expected {change.base_revision}, found {entry.sha}",
        )


class BatchCommitter:
    """Turns a set of staged changes into one commit on one branch."""

    def __init__(self, client: "RepoDeskClient") -> None:
        self.client = client

    def commit(
        self,
        repository: RepositoryRef,
        branch: str,
        changes: list[StagedChange],
        message: str,
        author: AuthorIdentity | None = None,
    ) -> BatchCommitResult:
        """
        Commit changes to branch as one commit.

        Args:
            repository: Repository every change belongs to
            branch: Branch every change targets
            changes: Staged changes, at most one per path
            message: Commit message
            author: Author and committer identity (optional)

        Returns:
            BatchCommitResult with the commit sha and each path's new revision

        Raises:
            ValidationError: If there is nothing to commit or changes target
                another repository or branch
            ConflictError: If any base revision is stale or the branch moved
        """
        if not changes:
            raise ValidationError("NO_CHANGES", "No changes to commit")
        if not message:
            raise ValidationError("MISSING_MESSAGE", "A commit message is required")
        for change in changes:
            if change.resource_id.repository != repository or change.resource_id.ref != branch:
                raise ValidationError(
                    "MIXED_TARGETS",
                    f"Change for {change.resource_id} does not target {repository}@{branch}",
                )

        git = self.client.git
        ref = f"heads/{branch}"
        try:
            head_sha = git.get_ref(repository, ref)
            head = git.get_commit(repository, head_sha)
            current = {
                entry.path: entry
                for entry in git.get_tree(repository, head.tree_sha, recursive=True)
                if entry.type == "blob"
            }

            for change in changes:
                _verify(change, current)

            revisions: dict[str, str | None] = {}
            entries: list[dict[str, Any]] = []

            def put(path: str, mode: str, sha: str | None) -> None:
                revisions[path] = sha
                entries.append({"path": path, "mode": mode, "type": "blob", "sha": sha})

            for change in changes:
                path = change.resource_id.path
                existing = current.get(path)
                mode = existing.mode if existing else FILE_MODE
                if change.operation is ChangeOperation.DELETE:
                    put(path, mode, None)
                elif change.operation is ChangeOperation.RENAME:
                    source = current[change.old_path or ""]
                    if change.content is None:
                        blob_sha = source.sha
                    else:
                        blob_sha = git.create_blob(repository, change.content)
                    put(path, source.mode, blob_sha)
                    put(source.path, source.mode, None)
                else:
                    put(path, mode, git.create_blob(repository, change.content or ""))

            tree_sha = git.create_tree(repository, head.tree_sha, entries)
            commit = git.create_commit(
                repository, message, tree_sha, parents=[head_sha], author=author
            )
            git.update_ref(repository, ref, commit.sha, force=False)
        except RepoDeskError as e:
            log_remote_failure("commit_batch", f"{repository}@{branch}", e)
            raise

        logger.info(
            "Committed %d change(s) to %s@%s as %s",
            len(changes),
            repository,
            branch,
            commit.sha[:12],
        )
        return BatchCommitResult(
            commit_sha=commit.sha,
            message=message,
            files_changed=len(changes),
            revisions=revisions,
        )
