"""Configuration for lazy-changesets.

Settings live in the workspace root pyproject.toml:

    [tool.lazy-changesets]
    commit = true
    changelog = ["lazy_changesets.changelog:default_entry"]
    linked = [["pkg-a", "pkg-b"]]
    ignore = ["pkg-docs"]

They are validated once here; the rest of the code only sees a Config.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from packaging.utils import canonicalize_name
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from .toml import get_tool_table, load_pyproject

DEFAULT_CHANGELOG_GENERATOR = "lazy_changesets.changelog:default_entry"


class Config(BaseModel):
    """Validated [tool.lazy-changesets] settings.

    Attributes:
        commit: Stage and commit written files after ``version``.
        changelog: ``(generator, options)`` where generator is an import path
                   ``"module:function"``, or False to skip changelogs.
        linked: Groups of packages that always release with the same bump.
        ignore: Packages that are never bumped.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    commit: bool = False
    changelog: tuple[str, dict[str, Any] | None] | Literal[False] = False
    linked: tuple[tuple[str, ...], ...] = ()
    ignore: tuple[str, ...] = ()

    @field_validator("changelog", mode="before")
    @classmethod
    def _normalize_changelog(cls, value: Any) -> Any:
        # TOML has no null, so the options slot is optional there
        if value is True:
            return (DEFAULT_CHANGELOG_GENERATOR, None)
        if isinstance(value, str):
            return (value, None)
        if isinstance(value, (list, tuple)) and len(value) == 1:
            return (value[0], None)
        return value

    @field_validator("linked", mode="before")
    @classmethod
    def _normalize_linked(cls, value: Any) -> Any:
        # Repeats inside one group ("a" twice, or "Pkg_A" and "pkg-a") collapse
        if isinstance(value, (list, tuple)):
            return [
                list(dict.fromkeys(canonicalize_name(n) for n in group))
                if isinstance(group, (list, tuple))
                else group
                for group in value
            ]
        return value

    @field_validator("ignore", mode="before")
    @classmethod
    def _normalize_ignore(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return [canonicalize_name(n) if isinstance(n, str) else n for n in value]
        return value

    @model_validator(mode="after")
    def _check_groups(self) -> Config:
        seen: set[str] = set()
        for group in self.linked:
            for name in group:
                if name in seen:
                    raise ValueError(f"Package {name!r} appears in more than one linked group")
                seen.add(name)
        both = sorted(seen & set(self.ignore))
        if both:
            raise ValueError(f"Packages cannot be both linked and ignored: {', '.join(both)}")
        return self


def load_config(root: Path) -> Config:
    """Read and validate [tool.lazy-changesets] from ``<root>/pyproject.toml``.

    A missing table (or missing file) yields the defaults.

    Raises:
        ValueError: If the table contains invalid settings.
    """
    pyproject = root / "pyproject.toml"
    if not pyproject.exists():
        return Config()
    try:
        return Config.model_validate(get_tool_table(load_pyproject(pyproject)))
    except ValidationError as exc:
        raise ValueError(f"Invalid [tool.lazy-changesets] config:\n{exc}") from exc
