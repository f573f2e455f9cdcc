"""
Tests for the revision reader.
"""

import pytest

from repodesk.exceptions import NotAFileError, NotFoundError, UndecodableError
from repodesk.reader import RevisionReader, decode_remote_file
from repodesk.testing import InMemoryRepository, MockRepoDeskClient, create_mock_directory_entry
from repodesk.types.contents import DirectoryResource, FileResource, RemoteFile, ResourceId
from repodesk.types.repos import RepositoryRef


def test_read_file_decodes_content(
    mock_client: MockRepoDeskClient, remote_repo: InMemoryRepository, post_id: ResourceId
) -> None:
    reader = RevisionReader(mock_client)

    resource = reader.read(post_id)

    assert isinstance(resource, FileResource)
    assert not resource.is_directory
    assert resource.content == remote_repo.read_text("main", "content/hello.md")
    assert resource.revision == remote_repo.blob_sha("main", "content/hello.md")


def test_read_directory_lists_children(mock_client: MockRepoDeskClient, repository: RepositoryRef) -> None:
    reader = RevisionReader(mock_client)

    resource = reader.read(ResourceId(repository, "content", "main"))

    assert isinstance(resource, DirectoryResource)
    assert resource.is_directory
    assert sorted(entry.name for entry in resource.entries) == ["drafts", "hello.md", "index.md"]


def test_read_file_rejects_directory(mock_client: MockRepoDeskClient, repository: RepositoryRef) -> None:
    reader = RevisionReader(mock_client)

    with pytest.raises(NotAFileError):
        reader.read_file(ResourceId(repository, "content", "main"))


def test_read_missing_path(mock_client: MockRepoDeskClient, repository: RepositoryRef) -> None:
    reader = RevisionReader(mock_client)

    with pytest.raises(NotFoundError):
        reader.read(ResourceId(repository, "nope.md", "main"))


def test_read_at_commit_sha(
    mock_client: MockRepoDeskClient, remote_repo: InMemoryRepository, post_id: ResourceId
) -> None:
    old_commit = remote_repo.head()
    remote_repo.write_file("main", post_id.path, "rewritten")
    reader = RevisionReader(mock_client)

    assert reader.read_file(post_id).content == "rewritten"
    assert reader.read_file(post_id.at(old_commit)).content.startswith("---\ntitle: Hello World")


def test_non_utf8_content_is_undecodable(
    mock_client: MockRepoDeskClient, remote_repo: InMemoryRepository, repository: RepositoryRef
) -> None:
    remote_repo.write_file("main", "logo.bin", b"\xff\xfe\x00binary")
    reader = RevisionReader(mock_client)

    with pytest.raises(UndecodableError) as exc_info:
        reader.read(ResourceId(repository, "logo.bin", "main"))

    assert exc_info.value.status == 400


@pytest.mark.parametrize(
    ("encoding", "content"),
    [("none", ""), (None, None), ("base64", None), ("base64", "@@not base64@@")],
)
def test_decode_remote_file_rejects(encoding: str | None, content: str | None) -> None:
    resource_id = ResourceId(RepositoryRef("octo", "site"), "big.md", "main")
    remote = RemoteFile(entry=create_mock_directory_entry("big.md"), encoding=encoding, encoded_content=content)

    with pytest.raises(UndecodableError):
        decode_remote_file(resource_id, remote)


def test_current_revision(
    mock_client: MockRepoDeskClient, remote_repo: InMemoryRepository, post_id: ResourceId
) -> None:
    reader = RevisionReader(mock_client)

    assert reader.current_revision(post_id) == remote_repo.blob_sha("main", post_id.path)
    assert reader.current_revision(ResourceId(post_id.repository, "gone.md", "main")) is None


def test_current_revision_does_not_decode(
    mock_client: MockRepoDeskClient, remote_repo: InMemoryRepository, repository: RepositoryRef
) -> None:
    remote_repo.write_file("main", "logo.bin", b"\xff\xfe")
    reader = RevisionReader(mock_client)

    assert reader.current_revision(ResourceId(repository, "logo.bin", "main")) is not None


def test_check_unchanged(
    mock_client: MockRepoDeskClient, remote_repo: InMemoryRepository, post_id: ResourceId
) -> None:
    reader = RevisionReader(mock_client)
    revision = remote_repo.blob_sha("main", post_id.path)

    report = reader.check(post_id, revision)

    assert report.to_dict() == {"exists": True, "currentRevision": revision, "changed": False}


def test_check_detects_concurrent_change(
    mock_client: MockRepoDeskClient, remote_repo: InMemoryRepository, post_id: ResourceId
) -> None:
    reader = RevisionReader(mock_client)
    seen = remote_repo.blob_sha("main", post_id.path)
    remote_repo.write_file("main", post_id.path, "edited elsewhere")

    report = reader.check(post_id, seen)

    assert report.exists
    assert report.changed
    assert report.current_revision == remote_repo.blob_sha("main", post_id.path)


def test_check_without_known_revision_is_unchanged(
    mock_client: MockRepoDeskClient, post_id: ResourceId
) -> None:
    report = RevisionReader(mock_client).check(post_id, None)

    assert report.exists
    assert not report.changed


@pytest.mark.parametrize("path", ["gone.md", "content"])
def test_check_missing_or_directory(
    mock_client: MockRepoDeskClient, repository: RepositoryRef, path: str
) -> None:
    report = RevisionReader(mock_client).check(ResourceId(repository, path, "main"), "abc")

    assert report.to_dict() == {"exists": False, "currentRevision": None, "changed": False}
