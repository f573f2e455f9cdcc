"""Repository identifier parsing."""

import re

from repodesk.exceptions import InvalidRepoFormatError
from repodesk.types.repos import RepositoryRef

_REPO_PATTERN = re.compile(r"([^/]+)/([^/]+)")


def parse_repo(value: str) -> RepositoryRef:
    """
    Split an 'owner/name' string into a RepositoryRef.

    Args:
        value: Repository identifier, exactly one '/' between two
            non-empty segments

    Returns:
        RepositoryRef with owner and name

    Raises:
        InvalidRepoFormatError: If the value has any other shape
    """
    if not isinstance(value, str):
        raise InvalidRepoFormatError(str(value))
    match = _REPO_PATTERN.fullmatch(value)
    if match is None:
        raise InvalidRepoFormatError(value)
    owner, name = match.groups()
    return RepositoryRef(owner=owner, name=name)
