"""Version resolution: changesets + workspace snapshot → new versions.

This is the pure core of lazy-changesets. It never touches the filesystem
or git; the pipeline reads inputs, calls resolve_versions(), and writes the
result.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .changesets import aggregate_bumps
from .graph import build_graph
from .models import BumpType, ChangeRecord, PackageDescriptor, ResolvedBump
from .propagate import propagate_bumps
from .versions import bump_version


def resolve_versions(
    packages: Iterable[PackageDescriptor],
    linked: Iterable[Sequence[str]],
    records: Sequence[ChangeRecord],
    ignore: Iterable[str] = (),
) -> list[ResolvedBump]:
    """Work out which packages to release and at which versions.

    Args:
        packages: Workspace snapshot. Output follows this order.
        linked: Linked groups; members always get the same bump.
        records: Pending changesets.
        ignore: Packages that are never bumped, whatever the changesets say.

    Returns:
        One ResolvedBump per released package. Packages left at ``none`` are
        not included, so an empty list means there is nothing to release.

    Raises:
        ValueError: If a package is both ignored and in a linked group; the
                    group could not release in lockstep.

    Example:
        pkg-b depends on pkg-a, and a changeset asks for a minor bump of
        pkg-a. Both at 1.0.0:
        resolve_versions(...) → [pkg-a 1.0.0 → 1.1.0 (minor),
                                 pkg-b 1.0.0 → 1.0.1 (patch)]
    """
    packages = list(packages)
    linked = [list(group) for group in linked]
    ignore = set(ignore)

    both = sorted(ignore & {name for group in linked for name in group})
    if both:
        raise ValueError(f"Packages cannot be both linked and ignored: {', '.join(both)}")

    graph = build_graph(packages, linked)

    initial = aggregate_bumps(records, known=graph.index)
    if not initial:
        return []

    final = propagate_bumps(graph, initial, frozen=ignore)

    resolved: list[ResolvedBump] = []
    for pkg, bump_type in zip(packages, final):
        if bump_type is BumpType.NONE:
            continue
        resolved.append(
            ResolvedBump(
                name=pkg.name,
                type=bump_type,
                old_version=pkg.version,
                new_version=bump_version(pkg.version, bump_type),
                changesets=[
                    record.id
                    for record in records
                    if any(r.name == pkg.name for r in record.releases)
                ],
            )
        )
    return resolved
