"""
Editor session: the caller-facing surface.

One EditorSession per active editor. It owns that editor's staging ledger and
answers each request payload with a ResponseEnvelope. Payload keys are
camelCase, matching the JSON the editing UI sends.
"""

import functools
from collections.abc import Callable
from typing import Any

from repodesk.batch import BatchCommitter
from repodesk.client import RepoDeskClient
from repodesk.collection import CollectionAccessor
from repodesk.config import Settings
from repodesk.envelope import ResponseEnvelope
from repodesk.exceptions import NotFoundError, RepoDeskError, ValidationError
from repodesk.frontmatter import FrontMatterDecoder, decode_front_matter, to_json_compatible
from repodesk.history import MAX_HISTORY_LIMIT, HistoryReader
from repodesk.locator import parse_repo
from repodesk.logging import get_logger
from repodesk.reader import RevisionReader
from repodesk.reverter import Reverter
from repodesk.staging import StagingLedger
from repodesk.types.contents import AuthorIdentity, ResourceId, normalize_path
from repodesk.types.repos import RepositoryRef
from repodesk.types.staging import ChangeOperation
from repodesk.writer import ConflictSafeWriter

logger = get_logger()

Payload = dict[str, Any]


def _enveloped(operation: str) -> Callable[..., Callable[..., ResponseEnvelope]]:
    """Turn a handler returning data into one returning a ResponseEnvelope."""

    def decorator(handler: Callable[..., Payload]) -> Callable[..., ResponseEnvelope]:
        @functools.wraps(handler)
        def wrapper(self: "EditorSession", payload: Payload | None = None) -> ResponseEnvelope:
            try:
                return ResponseEnvelope.ok(handler(self, payload or {}))
            except RepoDeskError as e:
                logger.info("%s rejected: %s", operation, e)
                return ResponseEnvelope.from_error(e)
            except Exception as e:
                logger.exception("%s failed unexpectedly", operation)
                return ResponseEnvelope(
                    success=False,
                    status=500,
                    error=str(e) or f"Failed to {operation}",
                    code="INTERNAL_ERROR",
                )

        return wrapper

    return decorator


class EditorSession:
    """
    Caller-facing operations for one editing session.

    Example:
        ```python
        session = EditorSession.from_env()
        loaded = session.load({"repo": "octo/site", "branch": "main", "path": "p.md"})
        result = session.commit({
            "repo": "octo/site",
            "branch": "main",
            "path": "p.md",
            "content": "Y",
            "message": "Update p.md",
            "baseRevision": loaded.data["revision"],
        })
        if result.status == 409:
            ...  # re-read, re-apply, resubmit
        ```
    """

    def __init__(
        self,
        client: RepoDeskClient,
        settings: Settings | None = None,
        decoder: FrontMatterDecoder = decode_front_matter,
        ledger: StagingLedger | None = None,
    ) -> None:
        self.client = client
        self.settings = settings
        self.decoder = decoder
        self.ledger = ledger if ledger is not None else StagingLedger()

        self.reader = RevisionReader(client)
        self.writer = ConflictSafeWriter(client)
        self.history_reader = HistoryReader(client, self.reader)
        self.reverter = Reverter(client, self.reader, self.history_reader, self.writer)
        self.collections = CollectionAccessor(client, decoder=decoder, reader=self.reader)
        self.committer = BatchCommitter(client)

    @classmethod
    def from_env(cls, decoder: FrontMatterDecoder = decode_front_matter) -> "EditorSession":
        """
        Create a session from environment variables.

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        settings = Settings.from_env()
        return cls(RepoDeskClient.from_settings(settings), settings=settings, decoder=decoder)

    # ------------------------------------------------------------------
    # Payload helpers
    # ------------------------------------------------------------------

    def _defaults(self) -> Payload:
        if self.settings is None:
            return {}
        return {
            "repo": self.settings.repo.full_name if self.settings.repo else None,
            "branch": self.settings.branch,
        }

    def _require(self, payload: Payload, *names: str) -> list[Any]:
        """
        Return the named fields, falling back to configured repo and branch.

        Raises:
            ValidationError: If any field is missing or empty
        """
        defaults = self._defaults()
        values = [payload.get(name) or defaults.get(name) for name in names]
        missing = [name for name, value in zip(names, values) if value in (None, "")]
        if missing:
            raise ValidationError(
                "MISSING_FIELDS", f"Missing required fields: {', '.join(missing)}"
            )
        return values

    def _resource(self, payload: Payload, path_key: str = "path") -> ResourceId:
        repo, branch, path = self._require(payload, "repo", "branch", path_key)
        return ResourceId(repository=parse_repo(repo), path=path, ref=branch)

    def _author(self, payload: Payload) -> AuthorIdentity | None:
        name = payload.get("authorName")
        email = payload.get("authorEmail")
        if name and email:
            return AuthorIdentity(name=name, email=email)
        return self.settings.default_author if self.settings else None

    @staticmethod
    def _content(payload: Payload) -> str:
        content = payload.get("content")
        if content is None:
            raise ValidationError("MISSING_FIELDS", "Missing required fields: content")
        if not isinstance(content, str):
            raise ValidationError("INVALID_CONTENT", "content must be a string")
        return content

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    @_enveloped("check file status")
    def check(self, payload: Payload) -> Payload:
        """{repo, branch, path, knownRevision} -> {exists, currentRevision, changed}"""
        resource_id = self._resource(payload)
        return self.reader.check(resource_id, payload.get("knownRevision")).to_dict()

    @_enveloped("load file")
    def load(self, payload: Payload) -> Payload:
        """{repo, branch, path} -> content split into front-matter and body."""
        resource_id = self._resource(payload)
        resource = self.reader.read_file(resource_id)
        front_matter = self.decoder(resource.content)
        return {
            "content": front_matter.body,
            "frontmatter": to_json_compatible(front_matter.metadata),
            "frontmatterString": front_matter.raw_block,
            "original": resource.content,
            "revision": resource.revision,
            "path": resource_id.path,
        }

    @_enveloped("fetch commit history")
    def history(self, payload: Payload) -> Payload:
        """{repo, branch, path, limit} -> commits, each message cut to its first line."""
        resource_id = self._resource(payload)
        limit = payload.get("limit", MAX_HISTORY_LIMIT)
        commits = self.history_reader.list_commits(resource_id, limit=limit)
        return {"commits": [commit.to_dict() for commit in commits]}

    @_enveloped("list files")
    def list_files(self, payload: Payload) -> Payload:
        """{repo, branch, folder} -> markdown files with front-matter summaries."""
        repo, branch = self._require(payload, "repo", "branch")
        folder = payload.get("folder")
        if folder is None:
            folder = self.settings.folder if self.settings else ""
        resource_id = ResourceId(repository=parse_repo(repo), path=folder, ref=branch)
        try:
            items = self.collections.list(resource_id)
        except NotFoundError as e:
            raise NotFoundError(e.code, f"Path '{folder}' not found in repository", e.request_id) from e
        return {"files": [item.to_dict() for item in items]}

    @_enveloped("list folders")
    def list_folders(self, payload: Payload) -> Payload:
        """{repo, branch, path} -> sub-directories of path."""
        repo, branch = self._require(payload, "repo", "branch")
        resource_id = ResourceId(
            repository=parse_repo(repo), path=payload.get("path") or "", ref=branch
        )
        folders = self.collections.list_folders(resource_id)
        return {"folders": [{"name": entry.name, "path": entry.path} for entry in folders]}

    # ------------------------------------------------------------------
    # Staging
    # ------------------------------------------------------------------

    @_enveloped("stage change")
    def stage(self, payload: Payload) -> Payload:
        """{repo, branch, path, content | delete, baseRevision?, message?, oldPath?} -> {staged}"""
        resource_id = self._resource(payload)
        base_revision = payload.get("baseRevision")
        old_path = payload.get("oldPath")
        operation = payload.get("type")
        if operation is None:
            if payload.get("delete"):
                operation = ChangeOperation.DELETE
            elif old_path and normalize_path(old_path) != resource_id.path:
                operation = ChangeOperation.RENAME
            elif base_revision:
                operation = ChangeOperation.UPDATE
            else:
                operation = ChangeOperation.CREATE

        change = self.ledger.stage(
            resource_id,
            operation,
            content=payload.get("content"),
            base_revision=base_revision,
            message=payload.get("message"),
            old_path=old_path,
        )
        return {"staged": True, "change": change.to_dict()}

    @_enveloped("stage deletion")
    def delete(self, payload: Payload) -> Payload:
        """{repo, branch, path, baseRevision, message?} -> {staged}; deletions are always staged."""
        resource_id = self._resource(payload)
        change = self.ledger.stage(
            resource_id,
            ChangeOperation.DELETE,
            base_revision=payload.get("baseRevision"),
            message=payload.get("message"),
        )
        return {"staged": True, "change": change.to_dict()}

    @_enveloped("list staged changes")
    def staged(self, payload: Payload) -> Payload:
        """{repo?, branch?} -> staged changes in staging order."""
        repository: RepositoryRef | None = None
        if payload.get("repo"):
            repository = parse_repo(payload["repo"])
        changes = self.ledger.list_staged(repository, payload.get("branch"))
        return {"changes": [change.to_dict() for change in changes], "count": len(changes)}

    @_enveloped("discard staged change")
    def discard(self, payload: Payload) -> Payload:
        """{repo, branch, path} -> {discarded}"""
        return {"discarded": self.ledger.discard(self._resource(payload))}

    # ------------------------------------------------------------------
    # Committing
    # ------------------------------------------------------------------

    @_enveloped("save file")
    def commit(self, payload: Payload) -> Payload:
        """
        {repo, branch, path, content, message, baseRevision?} -> {revision, commitSha}

        Stages the edit (replacing anything staged for the path) and flushes
        it immediately.
        """
        resource_id = self._resource(payload)
        content = self._content(payload)
        (message,) = self._require(payload, "message")
        base_revision = payload.get("baseRevision")
        self.ledger.stage(
            resource_id,
            ChangeOperation.UPDATE if base_revision else ChangeOperation.CREATE,
            content=content,
            base_revision=base_revision,
            message=message,
        )
        result = self.ledger.flush(resource_id, self.writer, author=self._author(payload))
        return result.to_dict()

    @_enveloped("commit staged changes")
    def commit_staged(self, payload: Payload) -> Payload:
        """{repo, branch, message} -> {commitSha, filesChanged, revisions}"""
        repo, branch, message = self._require(payload, "repo", "branch", "message")
        result = self.ledger.commit_all(
            parse_repo(repo), branch, self.committer, message, author=self._author(payload)
        )
        return result.to_dict()

    @_enveloped("revert file")
    def revert(self, payload: Payload) -> Payload:
        """{repo, branch, path, targetCommitSha, message} -> {revision, commitSha}"""
        resource_id = self._resource(payload)
        target_sha, message = self._require(payload, "targetCommitSha", "message")
        result = self.reverter.revert_to(
            resource_id, target_sha, message, author=self._author(payload)
        )
        return result.to_dict()

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    @_enveloped("fetch repositories")
    def list_repos(self, payload: Payload) -> Payload:
        repos = self.client.repos.list_for_authenticated_user()
        return {
            "repos": [
                {
                    "fullName": repo.full_name,
                    "name": repo.name,
                    "owner": repo.owner,
                    "defaultBranch": repo.default_branch,
                    "private": repo.private,
                    "visibility": repo.visibility,
                    "description": repo.description,
                }
                for repo in repos
            ]
        }

    @_enveloped("fetch branches")
    def list_branches(self, payload: Payload) -> Payload:
        (repo,) = self._require(payload, "repo")
        return {"branches": self.client.repos.list_branches(parse_repo(repo))}

    @_enveloped("connect to repository")
    def connect(self, payload: Payload) -> Payload:
        """{repo, branch} -> repository details after verifying access and branch."""
        repo_value, branch = self._require(payload, "repo", "branch")
        repository = parse_repo(repo_value)
        info = self.client.repos.get(repository)
        try:
            self.client.repos.get_branch(repository, branch)
        except NotFoundError as e:
            raise NotFoundError(e.code, f"Branch '{branch}' not found", e.request_id) from e

        try:
            branches = self.client.repos.list_branches(repository)
        except RepoDeskError as e:
            logger.warning("Could not fetch branches list for %s: %s", repository, e)
            branches = []

        return {
            "repo": {
                "name": info.name,
                "fullName": info.full_name,
                "defaultBranch": info.default_branch,
                "branches": branches,
            }
        }

    @_enveloped("get config")
    def config(self, payload: Payload) -> Payload:
        if self.settings is None:
            return {"configured": False, "tokenConfigured": False}
        return {
            "configured": self.settings.repo is not None,
            "tokenConfigured": bool(self.settings.token),
            "config": self.settings.to_dict(),
        }
