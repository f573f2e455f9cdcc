"""repodesk - revision-safe editing of files in a remote git repository."""

from repodesk.batch import BatchCommitter
from repodesk.client import RepoDeskClient
from repodesk.collection import CollectionAccessor
from repodesk.config import Settings
from repodesk.envelope import ResponseEnvelope
from repodesk.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    InvalidRepoFormatError,
    NotAFileError,
    NotFoundError,
    RateLimitedError,
    RepoDeskError,
    ServerError,
    UndecodableError,
    ValidationError,
)
from repodesk.frontmatter import decode_front_matter
from repodesk.history import HistoryReader
from repodesk.locator import parse_repo
from repodesk.logging import configure_logging, get_logger
from repodesk.reader import RevisionReader
from repodesk.reverter import Reverter
from repodesk.session import EditorSession
from repodesk.staging import StagingLedger
from repodesk.transport import HTTPTransport, RetryConfig
from repodesk.writer import ConflictSafeWriter

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Main client
    "RepoDeskClient",
    "Settings",
    # Core
    "parse_repo",
    "RevisionReader",
    "StagingLedger",
    "ConflictSafeWriter",
    "HistoryReader",
    "Reverter",
    "CollectionAccessor",
    "BatchCommitter",
    "decode_front_matter",
    # Caller-facing surface
    "EditorSession",
    "ResponseEnvelope",
    # Exceptions
    "RepoDeskError",
    "ValidationError",
    "InvalidRepoFormatError",
    "UndecodableError",
    "NotAFileError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "RateLimitedError",
    "ServerError",
    "ConfigurationError",
    # Transport
    "HTTPTransport",
    "RetryConfig",
    # Logging
    "configure_logging",
    "get_logger",
]
