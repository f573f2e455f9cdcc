"""
repodesk settings.

Settings are read from the environment once at startup and passed down
explicitly; nothing below this module reads the environment.
"""

import os
from dataclasses import dataclass
from typing import Any

from repodesk.exceptions import ConfigurationError, InvalidRepoFormatError
from repodesk.locator import parse_repo
from repodesk.types.contents import AuthorIdentity
from repodesk.types.repos import RepositoryRef

DEFAULT_BASE_URL = "https://api.github.com"
DEFAULT_BRANCH = "main"
DEFAULT_TIMEOUT = 30.0


@dataclass
class Settings:
    """Process-wide configuration."""

    token: str
    repo: RepositoryRef | None = None
    branch: str = DEFAULT_BRANCH
    folder: str = ""
    default_author: AuthorIdentity | None = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        """
        Load settings from environment variables.

        Environment variables:
            GITHUB_TOKEN: API token (required)
            GITHUB_REPO: Default repository as 'owner/repo' (optional)
            GITHUB_BRANCH: Default branch (optional, default: main)
            GITHUB_FOLDER: Folder holding the editable collection (optional)
            GITHUB_AUTHOR_NAME / GITHUB_AUTHOR_EMAIL: Default commit author,
                used only when both are set (optional)
            GITHUB_API_URL: API base URL (optional, default: https://api.github.com)
            REPODESK_TIMEOUT: Request timeout in seconds (optional, default: 30)

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            Settings instance

        Raises:
            ConfigurationError: If a required variable is missing or a value is invalid
        """
        env = os.environ if environ is None else environ

        token = env.get("GITHUB_TOKEN")
        if not token:
            raise ConfigurationError("GITHUB_TOKEN environment variable not set")

        repo: RepositoryRef | None = None
        repo_value = env.get("GITHUB_REPO")
        if repo_value:
            try:
                repo = parse_repo(repo_value)
            except InvalidRepoFormatError as e:
                raise ConfigurationError(
                    f"Invalid GITHUB_REPO format: {repo_value}. Use 'owner/repo'"
                ) from e

        author_name = env.get("GITHUB_AUTHOR_NAME", "")
        author_email = env.get("GITHUB_AUTHOR_EMAIL", "")
        default_author = (
            AuthorIdentity(name=author_name, email=author_email)
            if author_name and author_email
            else None
        )

        timeout_value = env.get("REPODESK_TIMEOUT")
        try:
            timeout = float(timeout_value) if timeout_value else DEFAULT_TIMEOUT
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid REPODESK_TIMEOUT: {timeout_value}. Must be a number of seconds"
            ) from e

        return cls(
            token=token,
            repo=repo,
            branch=env.get("GITHUB_BRANCH") or DEFAULT_BRANCH,
            folder=env.get("GITHUB_FOLDER", ""),
            default_author=default_author,
            base_url=env.get("GITHUB_API_URL") or DEFAULT_BASE_URL,
            timeout=timeout,
        )

    def to_dict(self) -> dict[str, Any]:
        """Public view of the settings, without the token."""
        return {
            "repo": self.repo.full_name if self.repo else None,
            "branch": self.branch,
            "folder": self.folder,
            "authorName": self.default_author.name if self.default_author else "",
            "authorEmail": self.default_author.email if self.default_author else "",
        }
