"""
Pytest plugin for repodesk testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
automatically discovered by pytest when this package is installed.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["repodesk.testing.conftest"]

Or import the fixtures directly:

    from repodesk.testing.fixtures import mock_client, session
"""

# Re-export all fixtures for pytest auto-discovery
from repodesk.testing.fixtures import (
    author,
    editor_settings,
    github,
    mock_client,
    post_id,
    remote_repo,
    repository,
    session,
)

__all__ = [
    "author",
    "editor_settings",
    "github",
    "mock_client",
    "post_id",
    "remote_repo",
    "repository",
    "session",
]
