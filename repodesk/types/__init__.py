"""repodesk type definitions.

This module exports all data model types used by the package.
"""

from repodesk.types.collections import CollectionItem, FrontMatter, ItemSummary
from repodesk.types.commits import (
    BatchCommitResult,
    CommitAuthor,
    CommitRecord,
    GitCommit,
    TreeEntry,
)
from repodesk.types.contents import (
    AuthorIdentity,
    DirectoryEntry,
    DirectoryResource,
    FileResource,
    RemoteFile,
    ResourceId,
    StalenessReport,
    WriteResult,
)
from repodesk.types.repos import Branch, RepositoryInfo, RepositoryRef
from repodesk.types.staging import ChangeOperation, StagedChange

__all__ = [
    # Repository types
    "RepositoryRef",
    "RepositoryInfo",
    "Branch",
    # Content types
    "ResourceId",
    "AuthorIdentity",
    "DirectoryEntry",
    "RemoteFile",
    "FileResource",
    "DirectoryResource",
    "StalenessReport",
    "WriteResult",
    # Commit types
    "CommitAuthor",
    "CommitRecord",
    "GitCommit",
    "TreeEntry",
    "BatchCommitResult",
    # Staging types
    "ChangeOperation",
    "StagedChange",
    # Collection types
    "FrontMatter",
    "ItemSummary",
    "CollectionItem",
]
