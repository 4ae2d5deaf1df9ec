"""Tests for lazy_changesets.deps."""

from __future__ import annotations

from pathlib import Path

from lazy_changesets.deps import dep_canonical_name, internal_deps, pin_dep, rewrite_pyproject


class TestDepCanonicalName:
    def test_with_version_spec(self) -> None:
        assert dep_canonical_name("requests>=2.0") == "requests"

    def test_with_extras(self) -> None:
        assert dep_canonical_name("requests[security]>=2.0") == "requests"

    def test_normalizes_underscores(self) -> None:
        assert dep_canonical_name("my_package>=1.0") == "my-package"

    def test_normalizes_case(self) -> None:
        assert dep_canonical_name("MyPackage>=1.0") == "mypackage"


class TestInternalDeps:
    def test_keeps_workspace_packages_only(self) -> None:
        deps = ["requests>=2.0", "pkg_a>=1.0", "pkg-b"]
        assert internal_deps(deps, {"pkg-a", "pkg-b"}) == ["pkg-a", "pkg-b"]

    def test_deduplicates(self) -> None:
        assert internal_deps(["pkg-a>=1.0", "pkg-a[extra]"], {"pkg-a"}) == ["pkg-a"]


class TestPinDep:
    def test_dep_with_existing_version_bound(self) -> None:
        assert pin_dep("requests>=2.0,<3.0", "2.31.0") == "requests==2.31.0"

    def test_preserves_multiple_extras_sorted(self) -> None:
        assert pin_dep("pkg[z,a,m]>=1.0", "3.0.0") == "pkg[a,m,z]==3.0.0"

    def test_preserves_marker(self) -> None:
        result = pin_dep('pkg>=1.0; sys_platform == "linux"', "1.2.0")
        assert result == 'pkg==1.2.0; sys_platform == "linux"'


class TestRewritePyproject:
    def test_updates_version(self, tmp_pyproject: Path) -> None:
        rewrite_pyproject(tmp_pyproject, "2.0.0", {})
        content = tmp_pyproject.read_text()
        assert 'version = "2.0.0"' in content
        # Unreleased internal deps keep their specifier
        assert "internal-dep>=1.0" in content

    def test_pins_released_deps(self, tmp_pyproject: Path) -> None:
        rewrite_pyproject(tmp_pyproject, "2.0.0", {"internal-dep": "1.5.0"})
        assert "internal-dep==1.5.0" in tmp_pyproject.read_text()

    def test_pins_optional_deps(self, tmp_pyproject: Path) -> None:
        rewrite_pyproject(tmp_pyproject, "2.0.0", {"another-internal": "0.8.0"})
        assert "another-internal==0.8.0" in tmp_pyproject.read_text()

    def test_pins_dependency_groups(self, tmp_pyproject: Path) -> None:
        rewrite_pyproject(tmp_pyproject, "2.0.0", {"group-internal": "0.2.0"})
        assert "group-internal==0.2.0" in tmp_pyproject.read_text()

    def test_skips_include_group_tables(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            '[project]\nname = "x"\nversion = "1.0.0"\n\n'
            "[dependency-groups]\n"
            'test = ["pkg-a>=1.0"]\n'
            'dev = [{include-group = "test"}, "pkg-a"]\n'
        )
        rewrite_pyproject(pyproject, "1.0.1", {"pkg-a": "2.0.0"})
        content = pyproject.read_text()
        assert 'include-group = "test"' in content
        assert content.count("pkg-a==2.0.0") == 2

    def test_preserves_comments(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text('[project]\n# keep me\nname = "x"\nversion = "1.0.0"\n')
        rewrite_pyproject(pyproject, "1.1.0", {})
        assert "# keep me" in pyproject.read_text()
