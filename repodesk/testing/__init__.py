"""repodesk testing utilities.

Provides an in-memory remote store, a client wired to it, and fixtures for
testing applications that use repodesk.
"""

from repodesk.testing.fixtures import (
    create_mock_commit_record,
    create_mock_directory_entry,
    create_mock_repository_info,
)
from repodesk.testing.mock import (
    InMemoryGitHub,
    InMemoryRepository,
    MockCall,
    MockRepoDeskClient,
    MockTransport,
)

__all__ = [
    # In-memory store
    "InMemoryGitHub",
    "InMemoryRepository",
    "MockTransport",
    "MockRepoDeskClient",
    "MockCall",
    # Helper functions
    "create_mock_repository_info",
    "create_mock_commit_record",
    "create_mock_directory_entry",
]
