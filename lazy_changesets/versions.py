"""Version parsing and bumping utilities.

Handles conversion between version strings and semver objects, with
special handling for incomplete version strings (e.g., "1.0" → "1.0.0").
"""

from __future__ import annotations

import semver

from .models import BumpType


def parse_version(version_str: str) -> semver.Version:
    """Parse a version string into a semver.Version object.

    Handles incomplete versions by padding with zeros:
    - "1" → "1.0.0"
    - "1.2" → "1.2.0"
    - "1.2.3" → "1.2.3"

    Only the first 3 components are used (major.minor.patch).
    Prerelease/build metadata is not supported.
    """
    parts = version_str.split(".")
    # Pad with zeros to ensure we have at least 3 parts
    while len(parts) < 3:
        parts.append("0")
    return semver.Version.parse(".".join(parts[:3]))


def bump_version(version_str: str, bump_type: BumpType) -> str:
    """Apply a bump to a version and return the new version string.

    Examples:
        bump_version("1.2.3", BumpType.MAJOR) → "2.0.0"
        bump_version("1.2.3", BumpType.MINOR) → "1.3.0"
        bump_version("1.2.3", BumpType.PATCH) → "1.2.4"

    Raises:
        ValueError: If bump_type is ``none``. Packages that are not bumped
                    never reach the version calculator.
    """
    version = parse_version(version_str)
    if bump_type is BumpType.MAJOR:
        return str(version.bump_major())
    if bump_type is BumpType.MINOR:
        return str(version.bump_minor())
    if bump_type is BumpType.PATCH:
        return str(version.bump_patch())
    raise ValueError(f"Cannot bump {version_str!r} with bump type {bump_type.value!r}")


def bump_patch(version_str: str) -> str:
    """Increment the patch version and return as a string.

    Examples:
        "1.2.3" → "1.2.4"
        "1.0" → "1.0.1"
        "2" → "2.0.1"
    """
    return bump_version(version_str, BumpType.PATCH)
