"""Dependency handling utilities.

Parses PEP 508 dependency strings and rewrites a package's pyproject.toml
after a release: new [project].version, and exact pins on the internal
dependencies that were released in the same run.
"""

from __future__ import annotations

from collections.abc import Container, Iterable, Mapping
from pathlib import Path
from typing import Any, cast

from packaging.requirements import Requirement
from packaging.utils import canonicalize_name

from .toml import dependency_arrays, load_pyproject, save_pyproject


def dep_canonical_name(dep_str: str) -> str:
    """Extract the canonical package name from a PEP 508 dependency string.

    Examples:
        "requests>=2.0" → "requests"
        "My_Package[extra]~=1.0" → "my-package"
    """
    return canonicalize_name(Requirement(dep_str).name)


def internal_deps(dep_strings: Iterable[str], workspace: Container[str]) -> list[str]:
    """Canonical names of the workspace packages among ``dep_strings``.

    Order of first appearance is kept; duplicates (a package listed both as
    a runtime dep and in an extra) are dropped.
    """
    names: list[str] = []
    for dep_str in dep_strings:
        name = dep_canonical_name(dep_str)
        if name in workspace and name not in names:
            names.append(name)
    return names


def pin_dep(dep_str: str, version: str) -> str:
    """Pin a PEP 508 dependency to an exact version.

    Extras and environment markers are kept; the version specifier is
    replaced.

    Examples:
        pin_dep("requests>=2.0", "2.31.0") → "requests==2.31.0"
        pin_dep("pkg[b,a]~=1.0; python_version>'3.9'", "1.5.0")
            → 'pkg[a,b]==1.5.0; python_version > "3.9"'
    """
    req = Requirement(dep_str)
    extras = f"[{','.join(sorted(req.extras))}]" if req.extras else ""
    marker = f"; {req.marker}" if req.marker else ""
    return f"{req.name}{extras}=={version}{marker}"


def rewrite_pyproject(
    pyproject_path: Path,
    new_version: str,
    released_dep_versions: Mapping[str, str],
) -> None:
    """Set a package's new version and pin its released internal deps.

    Pins are applied wherever the dependency appears:
    - [project].dependencies
    - [project].optional-dependencies.*
    - [dependency-groups].*

    Uses tomlkit to preserve formatting and comments.

    Args:
        pyproject_path: Path to the pyproject.toml file.
        new_version: New version string to set.
        released_dep_versions: Map of canonical package name → new version
            for internal deps released in this run. Deps not listed keep
            their current specifier.
    """
    doc = load_pyproject(pyproject_path)
    # Cast needed because tomlkit types are complex unions
    project = cast(dict[str, Any], doc["project"])
    project["version"] = new_version

    if released_dep_versions:
        for array in dependency_arrays(doc):
            _pin_dep_list(array, released_dep_versions)

    save_pyproject(pyproject_path, doc)


def _pin_dep_list(deps: list, versions: Mapping[str, str]) -> None:
    """Pin matching dependency strings in a list, modifying it in place."""
    for i, dep_str in enumerate(deps):
        # dependency-groups may hold {include-group = ...} tables
        if not isinstance(dep_str, str):
            continue
        name = dep_canonical_name(str(dep_str))
        if name in versions:
            deps[i] = pin_dep(str(dep_str), versions[name])
