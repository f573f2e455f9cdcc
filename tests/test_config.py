"""
Tests for settings loading and client construction.
"""

import pytest

from repodesk.client import RepoDeskClient
from repodesk.config import DEFAULT_BASE_URL, Settings
from repodesk.exceptions import ConfigurationError
from repodesk.types.contents import AuthorIdentity
from repodesk.types.repos import RepositoryRef


def test_from_env_minimal() -> None:
    settings = Settings.from_env({"GITHUB_TOKEN": "ghp_x"})

    assert settings.token == "ghp_x"
    assert settings.repo is None
    assert settings.branch == "main"
    assert settings.folder == ""
    assert settings.default_author is None
    assert settings.base_url == DEFAULT_BASE_URL


def test_from_env_full() -> None:
    settings = Settings.from_env(
        {
            "GITHUB_TOKEN": "ghp_x",
            "GITHUB_REPO": "octo/site",
            "GITHUB_BRANCH": "drafts",
            "GITHUB_FOLDER": "src/content/blog",
            "GITHUB_AUTHOR_NAME": "Ada",
            "GITHUB_AUTHOR_EMAIL": "ada@example.com",
            "GITHUB_API_URL": "https://ghe.example.com/api/v3",
            "REPODESK_TIMEOUT": "5",
        }
    )

    assert settings.repo == RepositoryRef(owner="octo", name="site")
    assert settings.branch == "drafts"
    assert settings.folder == "src/content/blog"
    assert settings.default_author == AuthorIdentity(name="Ada", email="ada@example.com")
    assert settings.base_url == "https://ghe.example.com/api/v3"
    assert settings.timeout == 5.0


def test_author_requires_name_and_email() -> None:
    settings = Settings.from_env({"GITHUB_TOKEN": "ghp_x", "GITHUB_AUTHOR_NAME": "Ada"})

    assert settings.default_author is None


@pytest.mark.parametrize(
    "environ",
    [
        {},
        {"GITHUB_TOKEN": ""},
        {"GITHUB_TOKEN": "ghp_x", "GITHUB_REPO": "not-a-repo"},
        {"GITHUB_TOKEN": "ghp_x", "REPODESK_TIMEOUT": "soon"},
    ],
)
def test_from_env_invalid(environ: dict[str, str]) -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        Settings.from_env(environ)

    assert exc_info.value.code == "CONFIGURATION_ERROR"
    assert exc_info.value.status == 500


def test_to_dict_hides_token() -> None:
    settings = Settings(token="ghp_secret", repo=RepositoryRef("octo", "site"), folder="content")

    public = settings.to_dict()

    assert "ghp_secret" not in str(public)
    assert public == {
        "repo": "octo/site",
        "branch": "main",
        "folder": "content",
        "authorName": "",
        "authorEmail": "",
    }


def test_client_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_fromenv")
    monkeypatch.setenv("GITHUB_API_URL", "https://ghe.example.com/api/v3")

    with RepoDeskClient.from_env() as client:
        assert client.base_url == "https://ghe.example.com/api/v3"
        assert client.transport._client.headers["Authorization"] == "Bearer ghp_fromenv"
        assert client.contents.transport is client.transport


def test_client_from_env_without_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)

    with pytest.raises(ConfigurationError):
        RepoDeskClient.from_env()
