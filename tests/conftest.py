"""Shared fixtures for the repodesk test suite."""

from repodesk.testing.conftest import (  # noqa: F401
    author,
    editor_settings,
    github,
    mock_client,
    post_id,
    remote_repo,
    repository,
    session,
)
