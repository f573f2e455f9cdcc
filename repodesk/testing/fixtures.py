"""
Pytest fixtures for repodesk testing.

Provides an in-memory store with a seeded repository, clients and sessions
wired to it, and helpers for building sample data objects.
"""

from datetime import datetime, timezone
from typing import Any, Generator

import pytest

from repodesk.config import Settings
from repodesk.session import EditorSession
from repodesk.testing.mock import InMemoryGitHub, InMemoryRepository, MockRepoDeskClient
from repodesk.types.commits import CommitAuthor, CommitRecord
from repodesk.types.contents import AuthorIdentity, DirectoryEntry, ResourceId
from repodesk.types.repos import RepositoryInfo, RepositoryRef

SAMPLE_REPO = "octo/site"
SAMPLE_POST = """---
title: Hello World
description: First post
date: 2024-01-15
tags: [intro, news]
slug: hello-world
draft: false
---
Welcome to the site.
"""


# ============================================================================
# Store and Client Fixtures
# ============================================================================


@pytest.fixture
def github() -> InMemoryGitHub:
    """Provide an empty in-memory store."""
    return InMemoryGitHub()


@pytest.fixture
def remote_repo(github: InMemoryGitHub) -> InMemoryRepository:
    """
    Provide the sample repository, seeded with a small content collection.

    Example:
        ```python
        def test_my_feature(mock_client, remote_repo):
            remote_repo.write_file("main", "content/new.md", "# New")
            ...
        ```
    """
    repo = github.create_repository(SAMPLE_REPO, description="Sample site")
    repo.commit_files(
        "main",
        {
            "content/hello.md": SAMPLE_POST,
            "content/index.md": "---\ntitle: Home\n---\nIndex page\n",
            "content/drafts/todo.md": "# Todo\n",
            "README.md": "# Site\n",
        },
        message="Add content",
    )
    return repo


@pytest.fixture
def mock_client(
    github: InMemoryGitHub, remote_repo: InMemoryRepository
) -> Generator[MockRepoDeskClient, None, None]:
    """
    Provide a MockRepoDeskClient over the seeded store.

    Example:
        ```python
        def test_my_feature(mock_client):
            result = my_function(mock_client)
            assert mock_client.was_called("PUT", "/contents/")
        ```
    """
    client = MockRepoDeskClient(github)
    yield client
    client.reset_calls()


@pytest.fixture
def repository() -> RepositoryRef:
    """Provide the sample repository identifier."""
    return RepositoryRef(owner="octo", name="site")


@pytest.fixture
def post_id(repository: RepositoryRef) -> ResourceId:
    """Provide the identifier of the seeded sample post on main."""
    return ResourceId(repository=repository, path="content/hello.md", ref="main")


@pytest.fixture
def author() -> AuthorIdentity:
    """Provide a commit author identity."""
    return AuthorIdentity(name="Test Author", email="author@example.com")


@pytest.fixture
def editor_settings(author: AuthorIdentity) -> Settings:
    """Provide settings pointing at the sample repository."""
    return Settings(
        token="ghp_testtoken",
        repo=RepositoryRef(owner="octo", name="site"),
        branch="main",
        folder="content",
        default_author=author,
    )


@pytest.fixture
def session(mock_client: MockRepoDeskClient, editor_settings: Settings) -> EditorSession:
    """Provide an EditorSession over the seeded store."""
    return EditorSession(mock_client, settings=editor_settings)


# ============================================================================
# Helper Functions
# ============================================================================


def create_mock_repository_info(
    full_name: str = SAMPLE_REPO,
    default_branch: str = "main",
    private: bool = False,
    description: str = "",
) -> RepositoryInfo:
    """
    Create a RepositoryInfo with sensible defaults.

    Args:
        full_name: Repository name as 'owner/name'
        default_branch: Default branch name
        private: Whether the repository is private
        description: Repository description

    Returns:
        RepositoryInfo object
    """
    owner, name = full_name.split("/", 1)
    return RepositoryInfo(
        full_name=full_name,
        name=name,
        owner=owner,
        default_branch=default_branch,
        private=private,
        description=description,
    )


def create_mock_commit_record(
    sha: str = "a" * 40,
    message: str = "Update content",
    author_name: str = "Test Author",
    date: datetime | None = None,
) -> CommitRecord:
    """Create a CommitRecord with sensible defaults."""
    return CommitRecord(
        sha=sha,
        message=message,
        author=CommitAuthor(
            name=author_name,
            email="author@example.com",
            date=date or datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
        ),
    )


def create_mock_directory_entry(
    path: str = "content/hello.md",
    type: str = "file",
    revision: str = "b" * 40,
    **overrides: Any,
) -> DirectoryEntry:
    """Create a DirectoryEntry with sensible defaults."""
    fields: dict[str, Any] = {
        "name": path.rsplit("/", 1)[-1],
        "path": path,
        "revision": revision,
        "type": type,
        "size": 0,
        "html_url": None,
        "download_url": None,
    }
    fields.update(overrides)
    return DirectoryEntry(**fields)
