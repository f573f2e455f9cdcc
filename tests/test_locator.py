"""
Property-based tests for repository identifier parsing.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from repodesk.exceptions import InvalidRepoFormatError, ValidationError
from repodesk.locator import parse_repo
from repodesk.types.repos import RepositoryRef

segment_strategy = st.text(
    min_size=1,
    max_size=40,
    alphabet=st.characters(whitelist_categories=("L", "N"), whitelist_characters="-_."),
)


@given(owner=segment_strategy, name=segment_strategy)
@settings(max_examples=100)
def test_parse_repo_round_trip(owner: str, name: str) -> None:
    """
    Property: any 'owner/name' with non-empty, slash-free segments parses
    back into the same two parts.
    """
    ref = parse_repo(f"{owner}/{name}")

    assert ref == RepositoryRef(owner=owner, name=name)
    assert ref.full_name == f"{owner}/{name}"
    assert str(ref) == f"{owner}/{name}"


@pytest.mark.parametrize(
    "value",
    ["", "owner", "owner/", "/name", "a/b/c", "owner//name", "/"],
)
def test_parse_repo_rejects_malformed(value: str) -> None:
    with pytest.raises(InvalidRepoFormatError) as exc_info:
        parse_repo(value)

    assert exc_info.value.code == "INVALID_REPO_FORMAT"
    assert exc_info.value.status == 400


def test_parse_repo_rejects_non_string() -> None:
    with pytest.raises(ValidationError):
        parse_repo(None)  # type: ignore[arg-type]


def test_invalid_repo_format_is_validation_error() -> None:
    assert issubclass(InvalidRepoFormatError, ValidationError)
