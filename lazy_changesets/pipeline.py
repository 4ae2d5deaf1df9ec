"""Release pipeline: discover → read changesets → resolve → write → commit.

This module wires the pure resolver to the outside world:
1. Discover all packages in the uv workspace
2. Read pending changesets from .changeset/
3. Resolve new versions (lazy_changesets.resolve)
4. Rewrite each released package's pyproject.toml and changelog
5. Delete the consumed changesets
6. Optionally stage and commit everything that was written

It also hosts the smaller commands: status, tag and add.
"""

from __future__ import annotations

import glob
from collections.abc import Sequence
from pathlib import Path

from .changelog import load_generator, write_changelog
from .changesets import (
    changeset_dir,
    delete_changesets,
    new_changeset_id,
    read_changesets,
    unknown_references,
    write_changeset,
)
from .config import Config, load_config
from .deps import internal_deps, rewrite_pyproject
from .models import ChangeRecord, PackageDescriptor, Release, ResolvedBump
from .resolve import resolve_versions
from .shell import add, commit, fatal, git, step, tag, warn
from .toml import (
    get_all_dependency_strings,
    get_project_name,
    get_project_version,
    get_workspace_member_globs,
    load_pyproject,
)

NOTHING_TO_RELEASE = "No unreleased changesets found, exiting."


def discover_packages(root: Path) -> dict[str, PackageDescriptor]:
    """Scan the workspace and discover all packages.

    Reads [tool.uv.workspace].members from root pyproject.toml to find
    package directories, then extracts name, version, and internal deps
    from each package's pyproject.toml.

    Returns:
        Map of package name to PackageDescriptor, in directory order.
    """
    step("Discovering workspace packages")

    root_doc = load_pyproject(root / "pyproject.toml")
    member_globs = get_workspace_member_globs(root_doc)

    # Expand globs to find all package directories
    member_dirs: list[Path] = []
    for pattern in member_globs:
        for match in sorted(glob.glob(str(root / pattern))):
            p = Path(match)
            if (p / "pyproject.toml").exists() and p not in member_dirs:
                member_dirs.append(p)

    if not member_dirs:
        fatal("No packages found matching workspace members")

    # First pass: names, versions and raw dependency strings
    found: list[tuple[str, str, str, list[str]]] = []
    for d in member_dirs:
        doc = load_pyproject(d / "pyproject.toml")
        found.append(
            (
                get_project_name(doc, d.name),
                str(d.relative_to(root)),
                get_project_version(doc),
                get_all_dependency_strings(doc),
            )
        )

    # Second pass: keep only deps that point inside the workspace
    workspace_names = {name for name, *_ in found}
    packages: dict[str, PackageDescriptor] = {}
    for name, path, version, dep_strings in found:
        packages[name] = PackageDescriptor(
            name=name,
            path=path,
            version=version,
            deps=tuple(internal_deps(dep_strings, workspace_names)),
        )

    for info in packages.values():
        deps = f" → [{', '.join(info.deps)}]" if info.deps else ""
        print(f"  {info.name} {info.version} ({info.path}){deps}")

    return packages


def load_settings(root: Path) -> Config:
    """Load config, exiting with a readable message if it's invalid.

    The changelog generator is imported here too, so a bad import path
    stops the command before any file is written.
    """
    try:
        config = load_config(root)
        if config.changelog:
            load_generator(config.changelog[0])
    except ValueError as exc:
        raise SystemExit(f"ERROR: {exc}") from exc
    return config


def load_changesets(root: Path) -> list[ChangeRecord]:
    """Read pending changesets, exiting if one of them is malformed."""
    step("Reading changesets")
    try:
        records = read_changesets(root)
    except ValueError as exc:
        raise SystemExit(f"ERROR: {exc}") from exc
    for record in records:
        requested = ", ".join(f"{r.name}: {r.type.value}" for r in record.releases)
        print(f"  {record.id} ({requested or 'no releases'})")
    return records


def plan_release(
    root: Path, config: Config
) -> tuple[dict[str, PackageDescriptor], list[ChangeRecord], list[ResolvedBump]]:
    """Gather inputs and resolve the release without touching any file.

    Returns:
        Tuple of (packages, changesets, resolved bumps). The bump list is
        empty when there is nothing to release.
    """
    records = load_changesets(root)
    if not records:
        return {}, [], []

    packages = discover_packages(root)

    for changeset_id, name in unknown_references(records, packages):
        warn(f"Changeset {changeset_id} references unknown package {name}, ignoring")

    step("Resolving versions")
    bumps = resolve_versions(packages.values(), config.linked, records, config.ignore)
    for bump in bumps:
        print(
            f"  {bump.name}: {bump.old_version} → {bump.new_version} ({bump.type.value})"
        )
    return packages, records, bumps


def apply_releases(
    root: Path,
    packages: dict[str, PackageDescriptor],
    bumps: Sequence[ResolvedBump],
    records: Sequence[ChangeRecord],
    config: Config,
) -> list[Path]:
    """Write new versions (and changelogs, if enabled) to disk.

    Changelog entries are rendered before anything is written, so a failing
    generator leaves the workspace untouched. Manifests are then written in
    ``bumps`` order, followed by changelogs in the same order. Internal deps
    that were released in this run are pinned to their new version.

    Returns:
        Every file written, in write order.
    """
    released = {bump.name: bump for bump in bumps}
    entries: list[tuple[ResolvedBump, str]] = []

    if config.changelog:
        generator_path, options = config.changelog
        try:
            generator = load_generator(generator_path)
        except ValueError as exc:
            raise SystemExit(f"ERROR: {exc}") from exc

        by_id = {record.id: record for record in records}
        for bump in bumps:
            info = packages[bump.name]
            updated = [released[dep] for dep in info.deps if dep in released]
            entry = generator(
                bump, [by_id[i] for i in bump.changesets], updated, options
            )
            entries.append((bump, entry))

    step("Writing new versions")
    written: list[Path] = []

    for bump in bumps:
        info = packages[bump.name]
        dep_versions = {
            dep: released[dep].new_version for dep in info.deps if dep in released
        }
        pyproject = root / info.path / "pyproject.toml"
        rewrite_pyproject(pyproject, bump.new_version, dep_versions)
        written.append(pyproject)
        print(f"  {bump.name}: {bump.old_version} → {bump.new_version}")

    for bump, entry in entries:
        changelog = root / packages[bump.name].path / "CHANGELOG.md"
        write_changelog(changelog, bump.name, entry)
        written.append(changelog)
        print(f"  {bump.name}: updated {changelog.relative_to(root)}")

    return written


def commit_release(
    root: Path, written: Sequence[Path], bumps: Sequence[ResolvedBump]
) -> None:
    """Stage written files plus the changeset directory, then commit."""
    step("Committing")
    for path in written:
        add(path, root)
    # Stages the deletion of consumed changesets
    add(changeset_dir(root), root)

    summary = "\n".join(
        f"  {b.name}: {b.old_version} → {b.new_version}" for b in bumps
    )
    commit(f"chore: version packages\n\n{summary}", root)
    print("  Committed")


def run_version(root: Path) -> list[ResolvedBump]:
    """Consume pending changesets and bump package versions.

    Returns:
        The resolved bumps; empty if there was nothing to release.
    """
    config = load_settings(root)
    packages, records, bumps = plan_release(root, config)
    if not bumps:
        warn(NOTHING_TO_RELEASE)
        return []

    written = apply_releases(root, packages, bumps, records, config)

    step("Removing consumed changesets")
    for path in delete_changesets(records, root):
        print(f"  {path.relative_to(root)}")

    if config.commit:
        commit_release(root, written, bumps)

    print(f"\n{'=' * 60}\nDone!\n{'=' * 60}")
    return bumps


def run_status(root: Path) -> list[ResolvedBump]:
    """Show what ``version`` would do, without writing anything."""
    config = load_settings(root)
    _, records, bumps = plan_release(root, config)
    if not bumps:
        warn(NOTHING_TO_RELEASE)
        return []

    step("Release plan")
    by_id = {record.id: record for record in records}
    for bump in bumps:
        print(f"  {bump.name} {bump.old_version} → {bump.new_version} ({bump.type.value})")
        if not bump.changesets:
            print("    (dependency or linked package bump)")
        for changeset_id in bump.changesets:
            requested = [
                r.type.value for r in by_id[changeset_id].releases if r.name == bump.name
            ]
            print(f"    {changeset_id}: {', '.join(requested)}")
    return bumps


def run_tag(root: Path) -> list[str]:
    """Tag every package at its current version, skipping existing tags.

    Tags follow the pattern {package-name}/v{version}.

    Returns:
        The tags that were created.
    """
    packages = discover_packages(root)

    step("Creating package tags")
    created: list[str] = []
    for info in packages.values():
        name = f"{info.name}/v{info.version}"
        if git("tag", "--list", name, cwd=root, check=False):
            print(f"  {name} (exists)")
            continue
        tag(name, root)
        created.append(name)
        print(f"  {name}")
    return created


def run_add(
    root: Path,
    releases: Sequence[Release],
    summary: str,
    changeset_id: str | None = None,
) -> Path:
    """Write a new changeset and return its path."""
    if not releases:
        fatal("A changeset needs at least one package")

    packages = discover_packages(root)
    for release in releases:
        if release.name not in packages:
            warn(f"{release.name} is not a workspace package")

    record = ChangeRecord(
        id=changeset_id or new_changeset_id(root),
        summary=summary,
        releases=list(releases),
    )
    path = write_changeset(record, root)
    print(f"\n✓ Wrote {path.relative_to(root)}")
    return path
