"""pyproject.toml access for workspace discovery and release writes.

Everything goes through tomlkit documents, so a release only changes the
version and dependency lines it means to change. Comments, ordering and
quoting in package manifests survive a ``version`` run.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import tomlkit
from packaging.utils import canonicalize_name

from .shell import fatal

TOOL_TABLE = "lazy-changesets"


def load_pyproject(path: Path) -> tomlkit.TOMLDocument:
    return tomlkit.parse(path.read_text())


def save_pyproject(path: Path, doc: tomlkit.TOMLDocument) -> None:
    path.write_text(tomlkit.dumps(doc))


def _section(doc: tomlkit.TOMLDocument, *keys: str) -> dict[str, Any]:
    """Walk nested tables, returning {} as soon as a key is missing."""
    table: Any = doc
    for key in keys:
        table = table.get(key) if isinstance(table, dict) else None
        if table is None:
            return {}
    return table if isinstance(table, dict) else {}


def get_project_name(doc: tomlkit.TOMLDocument, fallback: str) -> str:
    """Canonical (PEP 503) [project].name, or ``fallback`` when unset.

    Changesets, linked groups and dependency strings may all spell a name
    differently; everything is compared in canonical form.
    """
    return canonicalize_name(str(_section(doc, "project").get("name", fallback)))


def get_project_version(doc: tomlkit.TOMLDocument) -> str:
    """[project].version as a plain string ("0.0.0" when unset)."""
    return str(_section(doc, "project").get("version", "0.0.0"))


def dependency_arrays(doc: tomlkit.TOMLDocument) -> Iterator[list]:
    """Yield every array of dependency strings in a manifest.

    Covers [project].dependencies, each [project.optional-dependencies]
    extra and each PEP 735 [dependency-groups] entry. The arrays are the
    document's own, so editing them in place edits the manifest.
    """
    project = _section(doc, "project")
    deps = project.get("dependencies")
    if isinstance(deps, list):
        yield deps
    extras = _section(doc, "project", "optional-dependencies")
    groups = _section(doc, "dependency-groups")
    for table in (extras, groups):
        for group in table.values():
            if isinstance(group, list):
                yield group


def get_all_dependency_strings(doc: tomlkit.TOMLDocument) -> list[str]:
    """All PEP 508 strings from dependency_arrays(), in manifest order.

    {include-group = "..."} tables in dependency groups are skipped.
    """
    return [
        str(dep)
        for array in dependency_arrays(doc)
        for dep in array
        if isinstance(dep, str)
    ]


def get_workspace_member_globs(doc: tomlkit.TOMLDocument) -> list[str]:
    """Member patterns from the root manifest's [tool.uv.workspace].

    Raises:
        SystemExit: If the workspace declares no members.
    """
    members = _section(doc, "tool", "uv", "workspace").get("members")
    if not members:
        fatal("No [tool.uv.workspace] members defined in root pyproject.toml")
    return [str(m) for m in members]


def get_tool_table(doc: tomlkit.TOMLDocument) -> dict[str, Any]:
    """[tool.lazy-changesets] unwrapped to plain Python data ({} if absent)."""
    table = _section(doc, "tool", TOOL_TABLE)
    return table.unwrap() if table else {}
