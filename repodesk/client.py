"""
repodesk main client.

Provides the primary interface to the remote store.
"""

from typing import Any

from repodesk.clients import CommitsClient, ContentsClient, GitDataClient, ReposClient
from repodesk.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, Settings
from repodesk.transport import HTTPTransport, RetryConfig


class RepoDeskClient:
    """
    Main client for the remote store.

    Aggregates all resource clients over one HTTP transport.

    Example:
        ```python
        from repodesk import RepoDeskClient, parse_repo

        client = RepoDeskClient(token="ghp_...")
        # Or create from environment variables
        client = RepoDeskClient.from_env()

        repo = parse_repo("octo/site")
        page = client.contents.get(repo, "content/index.md", ref="main")
        ```
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            token: API token
            base_url: Base URL for API requests (default: https://api.github.com)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Retry policy for reads (optional, default: no retries)
        """
        self.base_url = base_url
        self.timeout = timeout

        self._transport = HTTPTransport(
            base_url=base_url,
            token=token,
            timeout=timeout,
            retry_config=retry_config,
        )
        self._init_resources()

    def _init_resources(self) -> None:
        self.contents = ContentsClient(self._transport)
        self.commits = CommitsClient(self._transport)
        self.repos = ReposClient(self._transport)
        self.git = GitDataClient(self._transport)

    @classmethod
    def from_settings(
        cls, settings: Settings, retry_config: RetryConfig | None = None
    ) -> "RepoDeskClient":
        """Create a client from loaded settings."""
        return cls(
            token=settings.token,
            base_url=settings.base_url,
            timeout=settings.timeout,
            retry_config=retry_config,
        )

    @classmethod
    def from_env(cls, retry_config: RetryConfig | None = None) -> "RepoDeskClient":
        """
        Create a client from environment variables.

        See Settings.from_env for the variables read.

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        return cls.from_settings(Settings.from_env(), retry_config=retry_config)

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()

    def __enter__(self) -> "RepoDeskClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
