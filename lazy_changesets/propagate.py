"""Bump propagation across dependency edges and linked groups.

Starting from the bumps requested by changesets, two rules are applied in
full passes until a pass changes nothing:

1. A package that depends on a bumped package gets at least a patch bump,
   because the dependency pin it ships with changes.
2. Every member of a linked group gets the highest bump in its group.

Bumps only ever go up, and there are only four of them, so the loop
terminates even when the dependency graph has cycles.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .graph import PackageGraph
from .models import BumpType


def propagate_bumps(
    graph: PackageGraph,
    initial: Mapping[str, BumpType],
    frozen: Iterable[str] = (),
) -> list[BumpType]:
    """Compute the final bump for every package.

    Args:
        graph: Reverse-dependency graph from build_graph().
        initial: Requested bump per package name. Missing names start at
                 ``none``; names not in the graph are ignored.
        frozen: Package names that are never bumped (the ``ignore``
                config). They stay at ``none`` whatever their dependencies
                or linked packages do.

    Returns:
        Final bump per package id, aligned with ``graph.names``.

    Raises:
        RuntimeError: If the passes fail to converge, which would mean a bump
                      went down somewhere.
    """
    n = len(graph)
    skip = {graph.index[name] for name in frozen if name in graph.index}
    severity = [
        BumpType.NONE if i in skip else initial.get(name, BumpType.NONE)
        for i, name in enumerate(graph.names)
    ]

    # Each package can be raised at most three times (none → patch → minor → major)
    max_passes = 3 * n + 1
    for _ in range(max_passes):
        changed = False

        # Dependents of a bumped package get at least a patch bump
        for i in range(n):
            if severity[i] is BumpType.NONE:
                continue
            for d in graph.dependents[i]:
                if d not in skip and severity[d] is BumpType.NONE:
                    severity[d] = BumpType.PATCH
                    changed = True

        # Linked packages move together
        for group in graph.groups:
            members = [q for q in group if q not in skip]
            if not members:
                continue
            top = max(severity[q] for q in members)
            for q in members:
                if severity[q] is not top:
                    severity[q] = top
                    changed = True

        if not changed:
            return severity

    raise RuntimeError(f"Bump propagation did not converge after {max_passes} passes")
