"""Changelog entries for released packages.

A changelog generator is any callable with the signature

    generator(bump, records, updated, options) -> str

where ``bump`` is the package's ResolvedBump, ``records`` the changesets
that mention the package, ``updated`` the ResolvedBumps of its internal
dependencies released in the same run, and ``options`` the second item of
the ``changelog`` setting. It returns the markdown for one version.
"""

from __future__ import annotations

import importlib
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from .models import BumpType, ChangeRecord, ResolvedBump

ChangelogGenerator = Callable[
    [ResolvedBump, Sequence[ChangeRecord], Sequence[ResolvedBump], Any], str
]

_HEADINGS = {
    BumpType.MAJOR: "### Major Changes",
    BumpType.MINOR: "### Minor Changes",
    BumpType.PATCH: "### Patch Changes",
}


def default_entry(
    bump: ResolvedBump,
    records: Sequence[ChangeRecord],
    updated: Sequence[ResolvedBump],
    options: Any = None,
) -> str:
    """Built-in generator: summaries grouped by the bump each changeset asked for.

    Example:
        ## 1.1.0

        ### Minor Changes

        - having-lotsof-fun: Add a frobnicate() helper.

        ### Patch Changes

        - Updated dependencies
          - pkg-b@1.0.1
    """
    sections: dict[BumpType, list[str]] = {t: [] for t in _HEADINGS}

    for record in records:
        requested = [r.type for r in record.releases if r.name == bump.name]
        if not requested:
            continue
        bump_type = max(requested)
        if bump_type is BumpType.NONE:
            continue
        # Indent continuation lines so multi-line summaries stay in the bullet
        summary = record.summary.strip().replace("\n", "\n  ")
        sections[bump_type].append(f"- {record.id}: {summary}")

    if updated:
        lines = ["- Updated dependencies"]
        lines.extend(f"  - {dep.name}@{dep.new_version}" for dep in updated)
        sections[BumpType.PATCH].append("\n".join(lines))

    if not any(sections.values()):
        sections[bump.type].append("- Released together with its linked packages")

    out = [f"## {bump.new_version}"]
    for bump_type in (BumpType.MAJOR, BumpType.MINOR, BumpType.PATCH):
        if sections[bump_type]:
            out.append("")
            out.append(_HEADINGS[bump_type])
            out.append("")
            out.extend(sections[bump_type])
    return "\n".join(out) + "\n"


def load_generator(import_path: str) -> ChangelogGenerator:
    """Resolve a ``"module:function"`` import path to a generator.

    Raises:
        ValueError: If the path is malformed or doesn't point at a callable.
    """
    module_name, sep, attr = import_path.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(
            f"Changelog generator must look like 'module:function', got {import_path!r}"
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ValueError(f"Cannot import changelog generator module {module_name!r}") from exc
    generator = getattr(module, attr, None)
    if not callable(generator):
        raise ValueError(f"{import_path!r} is not a callable changelog generator")
    return generator


def write_changelog(path: Path, package: str, entry: str) -> None:
    """Insert ``entry`` at the top of a package changelog.

    The file keeps a ``# <package>`` title line; new entries go right below
    it so the newest version is always first. The file is created if needed.
    """
    title = f"# {package}"
    existing = path.read_text() if path.exists() else ""

    first, _, rest = existing.partition("\n")
    body = rest if first.strip() == title else existing
    body = body.strip("\n")

    parts = [title, "", entry.strip("\n")]
    if body:
        parts.extend(["", body])
    path.write_text("\n".join(parts) + "\n")
