"""Repository-related data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RepositoryRef:
    """An 'owner/name' repository identifier, split into its two parts."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


@dataclass
class RepositoryInfo:
    """Repository information as listed for the authenticated principal."""

    full_name: str
    name: str
    owner: str
    default_branch: str
    private: bool
    description: str

    @property
    def visibility(self) -> str:
        return "private" if self.private else "public"


@dataclass
class Branch:
    """A branch and the commit its head points at."""

    name: str
    commit_sha: str
