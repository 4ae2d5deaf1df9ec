"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
import tomlkit

from lazy_changesets.models import BumpType, ChangeRecord, Release

WorkspaceFactory = Callable[..., Path]


@pytest.fixture
def tmp_pyproject(tmp_path: Path) -> Path:
    """Create a temporary pyproject.toml file."""
    content = """\
[project]
name = "test-package"
version = "1.0.0"
dependencies = [
    "requests>=2.0",
    "internal-dep>=1.0",
]

[project.optional-dependencies]
dev = ["pytest>=8.0", "another-internal>=0.5"]

[dependency-groups]
test = ["pytest>=8.0", "group-internal>=0.1"]
"""
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(content)
    return pyproject


@pytest.fixture
def sample_toml_doc() -> tomlkit.TOMLDocument:
    """Create a sample TOML document."""
    content = """\
[project]
name = "my-package"
version = "2.0.0"
dependencies = ["click>=8.0", "pydantic>=2.0"]

[project.optional-dependencies]
dev = ["pytest>=8.0"]
docs = ["sphinx>=7.0"]

[dependency-groups]
test = ["hypothesis>=6.0"]

[tool.uv.workspace]
members = ["packages/*", "libs/*"]

[tool.lazy-changesets]
commit = true
linked = [["pkg-a", "pkg-b"]]
"""
    return tomlkit.parse(content)


@pytest.fixture
def make_workspace(tmp_path: Path) -> WorkspaceFactory:
    """Build a uv workspace under tmp_path.

    Usage: make_workspace({"pkg-a": ("1.0.0", ["pkg-b>=1.0"])}, tool="commit = true")
    """

    def _make(
        packages: dict[str, tuple[str, list[str]]],
        tool: str = "",
    ) -> Path:
        root_toml = '[tool.uv.workspace]\nmembers = ["packages/*"]\n'
        if tool:
            root_toml += f"\n[tool.lazy-changesets]\n{tool}\n"
        (tmp_path / "pyproject.toml").write_text(root_toml)

        for name, (version, deps) in packages.items():
            package_dir = tmp_path / "packages" / name
            package_dir.mkdir(parents=True)
            dep_lines = "".join(f'    "{d}",\n' for d in deps)
            (package_dir / "pyproject.toml").write_text(
                f'[project]\nname = "{name}"\nversion = "{version}"\n'
                f"dependencies = [\n{dep_lines}]\n"
            )
        return tmp_path

    return _make


@pytest.fixture
def simple_workspace(make_workspace: WorkspaceFactory) -> Path:
    """Two packages at 1.0.0; pkg-a depends on pkg-b."""
    return make_workspace(
        {
            "pkg-a": ("1.0.0", ["pkg-b>=1.0.0"]),
            "pkg-b": ("1.0.0", []),
        }
    )


@pytest.fixture
def simple_changeset() -> ChangeRecord:
    return ChangeRecord(
        id="having-lotsof-fun",
        summary="This is a summary",
        releases=[Release(name="pkg-a", type=BumpType.MINOR)],
    )


@pytest.fixture
def simple_changeset2() -> ChangeRecord:
    return ChangeRecord(
        id="wouldnit-be-nice",
        summary="This is a summary",
        releases=[
            Release(name="pkg-a", type=BumpType.MINOR),
            Release(name="pkg-b", type=BumpType.PATCH),
        ],
    )
