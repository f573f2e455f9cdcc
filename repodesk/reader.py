"""
Revision reader.

Fetches a file or directory at a ref and resolves the store's two response
shapes into FileResource or DirectoryResource. Nothing downstream looks at
the raw store shape.
"""

import base64
import binascii
from typing import TYPE_CHECKING

from repodesk.exceptions import NotAFileError, NotFoundError, RepoDeskError, UndecodableError
from repodesk.logging import log_remote_failure
from repodesk.types.contents import (
    DirectoryResource,
    FileResource,
    RemoteFile,
    ResourceId,
    StalenessReport,
)

if TYPE_CHECKING:
    from repodesk.client import RepoDeskClient


def decode_remote_file(resource_id: ResourceId, remote: RemoteFile) -> FileResource:
    """
    Decode a store file object into text.

    Raises:
        UndecodableError: If the encoding is not base64 or the bytes are not UTF-8
    """
    if remote.encoding != "base64" or remote.encoded_content is None:
        raise UndecodableError(
            "UNDECODABLE",
            f"File '{resource_id.path}' content could not be decoded "
            f"(encoding: {remote.encoding})",
        )
    try:
        content = base64.b64decode(remote.encoded_content).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise UndecodableError(
            "UNDECODABLE", f"File '{resource_id.path}' is not UTF-8 text"
        ) from e
    return FileResource(
        resource_id=resource_id,
        content=content,
        revision=remote.entry.revision,
        entry=remote.entry,
    )


class RevisionReader:
    """Reads resources and their current revisions."""

    def __init__(self, client: "RepoDeskClient") -> None:
        self.client = client

    def read(self, resource_id: ResourceId) -> FileResource | DirectoryResource:
        """
        Read a file or directory.

        Args:
            resource_id: Repository, path and ref to read

        Returns:
            FileResource with decoded content, or DirectoryResource with entries

        Raises:
            NotFoundError: If the path does not exist at the ref
            UndecodableError: If a file's content cannot be decoded
        """
        try:
            data = self.client.contents.get(
                resource_id.repository, resource_id.path, ref=resource_id.ref
            )
        except RepoDeskError as e:
            log_remote_failure("read", resource_id, e)
            raise

        if isinstance(data, list):
            return DirectoryResource(resource_id=resource_id, entries=data)
        return decode_remote_file(resource_id, data)

    def read_file(self, resource_id: ResourceId) -> FileResource:
        """
        Read a path that must be a file.

        Raises:
            NotAFileError: If the path is a directory
        """
        resource = self.read(resource_id)
        if isinstance(resource, DirectoryResource):
            raise NotAFileError("NOT_A_FILE", f"Path '{resource_id.path}' is not a file")
        return resource

    def current_revision(self, resource_id: ResourceId) -> str | None:
        """
        Return the revision currently stored at a file path.

        Only the revision is needed, so the content is not decoded.

        Returns:
            The blob sha, or None if the path does not exist

        Raises:
            NotAFileError: If the path is a directory
        """
        try:
            data = self.client.contents.get(
                resource_id.repository, resource_id.path, ref=resource_id.ref
            )
        except NotFoundError:
            return None
        except RepoDeskError as e:
            log_remote_failure("current_revision", resource_id, e)
            raise

        if isinstance(data, list):
            raise NotAFileError("NOT_A_FILE", f"Path '{resource_id.path}' is not a file")
        return data.entry.revision

    def check(self, resource_id: ResourceId, known_revision: str | None) -> StalenessReport:
        """
        Compare the revision an editor last saw with the stored one.

        A missing path or a directory is reported as not existing and
        unchanged.

        Args:
            resource_id: File to check
            known_revision: Revision the editor loaded, if any

        Returns:
            StalenessReport
        """
        try:
            current = self.current_revision(resource_id)
        except NotAFileError:
            current = None

        if current is None:
            return StalenessReport(exists=False, current_revision=None, changed=False)

        return StalenessReport(
            exists=True,
            current_revision=current,
            changed=bool(known_revision) and current != known_revision,
        )
