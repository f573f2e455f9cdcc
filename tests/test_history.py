"""
Tests for history listing and reverting to a prior commit.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from repodesk.exceptions import ConflictError, NotFoundError, ValidationError
from repodesk.history import MAX_HISTORY_LIMIT, HistoryReader
from repodesk.reverter import Reverter
from repodesk.testing import InMemoryGitHub, InMemoryRepository, MockRepoDeskClient
from repodesk.types.contents import ResourceId
from repodesk.types.repos import RepositoryRef
from repodesk.writer import ConflictSafeWriter


@pytest.fixture
def edited(remote_repo: InMemoryRepository, post_id: ResourceId) -> list[str]:
    """Three more commits on the post, interleaved with an unrelated one."""
    shas = [remote_repo.head()]
    shas.append(remote_repo.write_file("main", post_id.path, "v2", message="Second draft"))
    remote_repo.write_file("main", "README.md", "unrelated")
    shas.append(remote_repo.write_file("main", post_id.path, "v3", message="Third draft\n\nLonger body"))
    return shas


def test_history_newest_first_and_filtered_by_path(
    mock_client: MockRepoDeskClient, post_id: ResourceId, edited: list[str]
) -> None:
    commits = HistoryReader(mock_client).list_commits(post_id)

    assert [commit.sha for commit in commits] == list(reversed(edited))
    assert [commit.summary for commit in commits] == ["Third draft", "Second draft", "Add content"]
    dates = [commit.date for commit in commits]
    assert dates == sorted(dates, reverse=True)


def test_history_to_dict_uses_first_line(
    mock_client: MockRepoDeskClient, post_id: ResourceId, edited: list[str]
) -> None:
    latest = HistoryReader(mock_client).list_commits(post_id, limit=1)[0].to_dict()

    assert latest["message"] == "Third draft"
    assert latest["sha"] == edited[-1]
    assert latest["author"]["name"] == "mock-user"
    assert latest["date"].startswith("2024-01-01T")


@pytest.mark.parametrize("limit", [1, 2])
def test_history_respects_limit(
    mock_client: MockRepoDeskClient, post_id: ResourceId, edited: list[str], limit: int
) -> None:
    commits = HistoryReader(mock_client).list_commits(post_id, limit=limit)

    assert len(commits) == limit
    assert mock_client.get_calls("GET", "/commits")[-1].params["per_page"] == limit


@pytest.mark.parametrize("limit", [0, -1, MAX_HISTORY_LIMIT + 1, True, "10"])
def test_history_rejects_bad_limit(mock_client: MockRepoDeskClient, post_id: ResourceId, limit: object) -> None:
    with pytest.raises(ValidationError):
        HistoryReader(mock_client).list_commits(post_id, limit=limit)  # type: ignore[arg-type]

    assert not mock_client.was_called("GET", "/commits")


def test_history_of_deleted_file(
    mock_client: MockRepoDeskClient, remote_repo: InMemoryRepository, post_id: ResourceId
) -> None:
    remote_repo.delete_file("main", post_id.path)

    commits = HistoryReader(mock_client).list_commits(post_id)

    assert [commit.summary for commit in commits] == [f"Delete {post_id.path}", "Add content"]


def test_materialize_at(mock_client: MockRepoDeskClient, post_id: ResourceId, edited: list[str]) -> None:
    history = HistoryReader(mock_client)

    assert history.materialize_at(post_id, edited[1]) == "v2"
    assert history.materialize_at(post_id, edited[2]) == "v3"


def test_materialize_before_file_existed(
    mock_client: MockRepoDeskClient, remote_repo: InMemoryRepository, post_id: ResourceId
) -> None:
    root = remote_repo.commits[remote_repo.head()].parents[0]

    with pytest.raises(NotFoundError):
        HistoryReader(mock_client).materialize_at(post_id, root)


def test_revert_restores_exact_content(
    mock_client: MockRepoDeskClient,
    remote_repo: InMemoryRepository,
    post_id: ResourceId,
    edited: list[str],
) -> None:
    head = remote_repo.head()

    result = Reverter(mock_client).revert_to(post_id, edited[1], message="Revert to second draft")

    assert remote_repo.read_text("main", post_id.path) == "v2"
    assert result.revision == remote_repo.blob_sha(edited[1], post_id.path)
    assert remote_repo.commits[result.commit_sha].parents == [head]


def test_revert_recreates_deleted_file(
    mock_client: MockRepoDeskClient,
    remote_repo: InMemoryRepository,
    post_id: ResourceId,
    edited: list[str],
) -> None:
    remote_repo.delete_file("main", post_id.path)

    Reverter(mock_client).revert_to(post_id, edited[2], message="Restore post")

    assert remote_repo.read_text("main", post_id.path) == "v3"


def test_revert_conflicts_when_file_changes_midway(
    mock_client: MockRepoDeskClient,
    remote_repo: InMemoryRepository,
    post_id: ResourceId,
    edited: list[str],
) -> None:
    writer = ConflictSafeWriter(mock_client)
    original_write = writer.write

    def racing_write(*args, **kwargs):
        remote_repo.write_file("main", post_id.path, "concurrent edit")
        return original_write(*args, **kwargs)

    writer.write = racing_write  # type: ignore[method-assign]

    with pytest.raises(ConflictError):
        Reverter(mock_client, writer=writer).revert_to(post_id, edited[1], message="Revert")

    assert remote_repo.read_text("main", post_id.path) == "concurrent edit"


def test_revert_to_unknown_commit(mock_client: MockRepoDeskClient, post_id: ResourceId) -> None:
    with pytest.raises(NotFoundError):
        Reverter(mock_client).revert_to(post_id, "0" * 40, message="Revert")

    assert not mock_client.was_called("PUT")


@given(
    contents=st.lists(st.text(max_size=100), min_size=2, max_size=5),
    data=st.data(),
)
@settings(max_examples=30)
def test_property_revert_is_byte_identical(contents: list[str], data: st.DataObject) -> None:
    """
    Property: revert restores exact bytes

    After any sequence of writes, reverting to the commit of write N leaves
    the file with exactly the content of write N.
    """
    github = InMemoryGitHub()
    remote = github.create_repository("octo/site")
    shas = [remote.write_file("main", "p.md", content) for content in contents]
    client = MockRepoDeskClient(github)
    resource_id = ResourceId(RepositoryRef("octo", "site"), "p.md", "main")
    target = data.draw(st.integers(min_value=0, max_value=len(shas) - 1))

    result = Reverter(client).revert_to(resource_id, shas[target], message="Revert")

    assert remote.read_text("main", "p.md") == contents[target]
    assert result.revision == remote.blob_sha(shas[target], "p.md")
