"""CLI entry point for lazy-changesets."""

from __future__ import annotations

from pathlib import Path

import click
from packaging.utils import canonicalize_name

from lazy_changesets.models import BumpType, Release
from lazy_changesets.pipeline import run_add, run_status, run_tag, run_version

root_option = click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Workspace root (the directory with the root pyproject.toml).",
)


def _parse_release(value: str) -> Release:
    name, sep, bump = value.rpartition(":")
    if not sep or not name:
        raise click.BadParameter(f"expected NAME:TYPE, got {value!r}")
    try:
        bump_type = BumpType(bump.strip().lower())
    except ValueError:
        choices = ", ".join(t.value for t in BumpType if t is not BumpType.NONE)
        raise click.BadParameter(f"bump type must be one of {choices}, got {bump!r}") from None
    if bump_type is BumpType.NONE:
        raise click.BadParameter(f"{name} needs a bump type other than 'none'")
    return Release(name=canonicalize_name(name), type=bump_type)


@click.group()
@click.version_option()
def cli() -> None:
    """Version a uv workspace from changesets."""


@cli.command()
@click.option(
    "-p",
    "--package",
    "packages",
    multiple=True,
    required=True,
    metavar="NAME:TYPE",
    help="Package to bump, e.g. pkg-a:minor (repeatable).",
)
@click.option("-m", "--message", required=True, help="Summary for the changelog.")
@click.option("--id", "changeset_id", default=None, help="Changeset id (random if omitted).")
@root_option
def add(packages: tuple[str, ...], message: str, changeset_id: str | None, root: Path) -> None:
    """Write a new changeset."""
    releases = [_parse_release(value) for value in packages]
    run_add(root.resolve(), releases, message, changeset_id)


@cli.command()
@root_option
def status(root: Path) -> None:
    """Show the versions the next `version` run would produce."""
    run_status(root.resolve())


@cli.command()
@root_option
def version(root: Path) -> None:
    """Consume changesets and bump package versions."""
    run_version(root.resolve())


@cli.command()
@root_option
def tag(root: Path) -> None:
    """Create {package}/v{version} tags for untagged package versions."""
    run_tag(root.resolve())
