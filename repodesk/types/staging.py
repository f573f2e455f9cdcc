"""Staged change data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from repodesk.types.contents import ResourceId, normalize_path


class ChangeOperation(str, Enum):
    """Kind of edit held in the staging ledger."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    RENAME = "rename"


@dataclass
class StagedChange:
    """
    An uncommitted edit to one resource.

    For a rename, resource_id is the destination, old_path the source and
    base_revision the source's revision. Content is optional; without it the
    source bytes move unchanged.
    """

    resource_id: ResourceId
    operation: ChangeOperation
    content: str | None = None
    base_revision: str | None = None
    message: str | None = None
    old_path: str | None = None
    staged_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if self.old_path is not None:
            self.old_path = normalize_path(self.old_path)

    @property
    def old_resource_id(self) -> ResourceId | None:
        """Source of a rename, at the same branch."""
        if self.old_path is None:
            return None
        return ResourceId(self.resource_id.repository, self.old_path, self.resource_id.ref)

    def touches(self, resource_id: ResourceId) -> bool:
        """Whether this change writes or removes resource_id."""
        return resource_id == self.resource_id or resource_id == self.old_resource_id

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "repo": self.resource_id.repository.full_name,
            "branch": self.resource_id.ref,
            "path": self.resource_id.path,
            "type": self.operation.value,
            "baseRevision": self.base_revision,
            "message": self.message,
            "stagedAt": self.staged_at.strftime("%Y-%m-%dT%H:%M:%SZ"),
        }
        if self.old_path is not None:
            data["oldPath"] = self.old_path
        return data
