"""Dependency graph utilities.

Turns a flat collection of package descriptors into an index-based graph.
Every package gets a stable integer id (its position in the input), and
edges are stored in reverse: for each package, the packages that depend on
it. Bumps flow from a dependency to its dependents, so reverse edges are
what the resolver walks.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from pydantic import BaseModel, ConfigDict

from .models import PackageDescriptor


class PackageGraph(BaseModel):
    """Immutable reverse-dependency graph over package ids.

    Attributes:
        names: Package name for each id.
        index: Map of package name → id.
        dependents: For each id, the sorted ids of packages that depend on it.
        groups: Linked groups as tuples of ids. Members always share a bump.
    """

    model_config = ConfigDict(frozen=True)

    names: tuple[str, ...]
    index: dict[str, int]
    dependents: tuple[tuple[int, ...], ...]
    groups: tuple[tuple[int, ...], ...] = ()

    def __len__(self) -> int:
        return len(self.names)

    def dependents_of(self, name: str) -> list[str]:
        """Names of the packages that directly depend on ``name``."""
        return [self.names[d] for d in self.dependents[self.index[name]]]


def build_graph(
    packages: Iterable[PackageDescriptor],
    linked: Iterable[Sequence[str]] = (),
) -> PackageGraph:
    """Build the reverse-dependency graph for a set of packages.

    Args:
        packages: Package descriptors. Their order defines the package ids.
        linked: Linked groups as lists of package names.

    Returns:
        A PackageGraph. Dependencies on packages outside the set are dropped
        (they are external, or not part of this run), as are unknown names
        in linked groups. Cycles are kept as-is.

    Example:
        If B depends on A and C depends on B:
        build_graph([A, B, C]).dependents_of("A") → ["B"]
    """
    packages = list(packages)
    index: dict[str, int] = {}
    for i, pkg in enumerate(packages):
        if pkg.name in index:
            raise ValueError(f"Duplicate package name: {pkg.name}")
        index[pkg.name] = i

    # Track reverse dependencies (who depends on each package)
    reverse: list[set[int]] = [set() for _ in packages]
    for i, pkg in enumerate(packages):
        for dep in pkg.deps:
            # Only keep edges between packages we know about
            if dep in index:
                reverse[index[dep]].add(i)

    groups: list[tuple[int, ...]] = []
    for group in linked:
        members = tuple(sorted({index[n] for n in group if n in index}))
        if members:
            groups.append(members)

    return PackageGraph(
        names=tuple(pkg.name for pkg in packages),
        index=index,
        dependents=tuple(tuple(sorted(r)) for r in reverse),
        groups=tuple(groups),
    )
