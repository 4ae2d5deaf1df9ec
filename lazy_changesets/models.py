"""Data models for lazy-changesets.

These Pydantic models represent the core data structures passed between
the changeset store, the version resolver and the manifest writer.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class BumpType(str, Enum):
    """Severity of a semantic version change.

    Ordered ``none < patch < minor < major`` so that competing requests can
    be combined with ``max()``. The string values match what authors write
    in changeset frontmatter.
    """

    NONE = "none"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, BumpType):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, BumpType):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, BumpType):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, BumpType):
            return NotImplemented
        return self.rank >= other.rank


_RANKS = {
    BumpType.NONE: 0,
    BumpType.PATCH: 1,
    BumpType.MINOR: 2,
    BumpType.MAJOR: 3,
}


class PackageDescriptor(BaseModel):
    """Snapshot of a single workspace package taken at the start of a run.

    Attributes:
        name: Canonical (PEP 503) package name, unique in the workspace.
        path: Relative path from workspace root to the package directory.
        version: Current version string from pyproject.toml.
        deps: Internal dependency names. Names that don't refer to another
              package in the same run are ignored by the resolver.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    path: str = ""
    version: str
    deps: tuple[str, ...] = ()


class Release(BaseModel):
    """One ``package: bump`` line of a changeset."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: BumpType


class ChangeRecord(BaseModel):
    """A pending changeset: which packages to bump, and why.

    Attributes:
        id: Unique identifier, also the file stem under ``.changeset/``.
        summary: Free text that ends up in the changelog.
        releases: Requested bumps, in the order the author wrote them.
    """

    id: str
    summary: str = ""
    releases: list[Release] = Field(default_factory=list)


class ResolvedBump(BaseModel):
    """Final outcome for one released package.

    Attributes:
        name: Package name.
        type: Final bump severity after propagation (never ``none``).
        old_version: The version before bumping.
        new_version: The version after bumping.
        changesets: Ids of the changesets that mention this package. Empty
                    when the package is only released because a dependency
                    or linked package was bumped.
    """

    name: str
    type: BumpType
    old_version: str
    new_version: str
    changesets: list[str] = Field(default_factory=list)
