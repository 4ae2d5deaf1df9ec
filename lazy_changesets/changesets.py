"""Changeset files: reading, writing and merging.

A changeset is a markdown file under ``.changeset/`` whose YAML
frontmatter maps package names to bump types, followed by a summary:

    ---
    "pkg-a": minor
    "pkg-b": patch
    ---

    Add a frobnicate() helper.

The file stem is the changeset id.
"""

from __future__ import annotations

import random
import re
from collections.abc import Container, Iterable
from pathlib import Path

import yaml
from packaging.utils import canonicalize_name

from .models import BumpType, ChangeRecord, Release

CHANGESET_DIR = ".changeset"

_FRONTMATTER = re.compile(
    r"\A\s*---[ \t]*\n(.*?)^---[ \t]*$\n?(.*)\Z", re.DOTALL | re.MULTILINE
)

_ADJECTIVES = (
    "brave", "calm", "clever", "eager", "fancy", "gentle", "happy", "jolly",
    "lazy", "lucky", "proud", "quiet", "shiny", "silly", "swift", "witty",
)
_NOUNS = (
    "badgers", "bees", "cats", "crabs", "dogs", "ducks", "foxes", "geese",
    "lions", "moles", "owls", "pandas", "seals", "snails", "tigers", "wolves",
)
_VERBS = (
    "bake", "dance", "dream", "fly", "hide", "jump", "laugh", "nap",
    "play", "run", "sing", "sleep", "smile", "swim", "wait", "wink",
)


def aggregate_bumps(
    records: Iterable[ChangeRecord],
    known: Container[str] | None = None,
) -> dict[str, BumpType]:
    """Merge changesets into one requested bump per package.

    When several changesets mention the same package the highest bump wins,
    so the result doesn't depend on the order of ``records``. Packages not
    mentioned by any changeset are left out.

    Args:
        records: Changesets to merge.
        known: If given, only these package names are kept. References to
               other packages are dropped rather than treated as errors.
    """
    bumps: dict[str, BumpType] = {}
    for record in records:
        for release in record.releases:
            if known is not None and release.name not in known:
                continue
            current = bumps.get(release.name, BumpType.NONE)
            bumps[release.name] = max(current, release.type)
    return bumps


def unknown_references(
    records: Iterable[ChangeRecord], known: Container[str]
) -> list[tuple[str, str]]:
    """List (changeset id, package name) pairs that name unknown packages."""
    return [
        (record.id, release.name)
        for record in records
        for release in record.releases
        if release.name not in known
    ]


def parse_changeset(changeset_id: str, text: str) -> ChangeRecord:
    """Parse the contents of a changeset file.

    Package names are normalized per PEP 503. A later line for the same
    package replaces an earlier one, the way YAML mappings behave.

    Raises:
        ValueError: If the frontmatter is missing, isn't a mapping, or
                    names an unknown bump type.
    """
    # Files written on Windows may use CRLF or bare CR line endings
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    match = _FRONTMATTER.match(text)
    if not match:
        raise ValueError(f"Changeset {changeset_id!r} has no frontmatter")

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise ValueError(f"Changeset {changeset_id!r} has invalid frontmatter: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Changeset {changeset_id!r} frontmatter must be a mapping")

    releases: list[Release] = []
    for name, bump in data.items():
        try:
            bump_type = BumpType(str(bump).strip().lower())
        except ValueError:
            raise ValueError(
                f"Changeset {changeset_id!r}: invalid bump type {bump!r} for {name}"
            ) from None
        releases.append(Release(name=canonicalize_name(str(name)), type=bump_type))

    return ChangeRecord(id=changeset_id, summary=match.group(2).strip(), releases=releases)


def format_changeset(record: ChangeRecord) -> str:
    """Render a changeset back to its on-disk form."""
    lines = ["---"]
    for release in record.releases:
        lines.append(f'"{release.name}": {release.type.value}')
    lines.append("---")
    lines.append("")
    lines.append(record.summary.strip())
    return "\n".join(lines) + "\n"


def changeset_dir(root: Path) -> Path:
    return root / CHANGESET_DIR


def read_changesets(root: Path) -> list[ChangeRecord]:
    """Load all pending changesets from ``<root>/.changeset``.

    Files are read in sorted order so runs are deterministic. README.md and
    non-markdown files (such as config) are skipped.

    Returns:
        List of changesets; empty if the directory doesn't exist.

    Raises:
        ValueError: If any changeset file is malformed.
    """
    directory = changeset_dir(root)
    if not directory.is_dir():
        return []

    records: list[ChangeRecord] = []
    for path in sorted(directory.glob("*.md")):
        if path.name.lower() == "readme.md":
            continue
        records.append(parse_changeset(path.stem, path.read_text()))
    return records


def write_changeset(record: ChangeRecord, root: Path) -> Path:
    """Write a changeset to ``<root>/.changeset/<id>.md`` and return the path."""
    directory = changeset_dir(root)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{record.id}.md"
    path.write_text(format_changeset(record))
    return path


def delete_changesets(records: Iterable[ChangeRecord], root: Path) -> list[Path]:
    """Remove consumed changeset files and return the removed paths."""
    directory = changeset_dir(root)
    removed: list[Path] = []
    for record in records:
        path = directory / f"{record.id}.md"
        if path.exists():
            path.unlink()
            removed.append(path)
    return removed


def new_changeset_id(root: Path | None = None) -> str:
    """Generate a readable random id, e.g. ``"witty-owls-dance"``.

    If ``root`` is given, ids already used in its ``.changeset`` directory
    are avoided.
    """
    taken = set()
    if root is not None and changeset_dir(root).is_dir():
        taken = {p.stem for p in changeset_dir(root).glob("*.md")}
    while True:
        candidate = "-".join(
            (random.choice(_ADJECTIVES), random.choice(_NOUNS), random.choice(_VERBS))
        )
        if candidate not in taken:
            return candidate
